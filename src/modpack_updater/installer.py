"""
Modpack instance installer.

Replaces the contents of a launcher instance directory with a release
archive. Two modes are supported:

  - ``replace``: empty the directory in place, then extract into it. A
    failure part-way leaves the directory empty or partially extracted.
  - ``swap``: extract into a staging sibling directory, then rename it over
    the destination. A failure before the rename leaves the old instance
    untouched.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import tempfile
import time
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from modpack_updater.config import InstallMode
from modpack_updater.errors import FilesystemError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallReport:
    destination: Path
    entries: int
    mode: InstallMode


class Installer:
    """
    Install a modpack archive into an instance directory.

    Usage::

        installer = Installer(mode=InstallMode.SWAP)
        report = installer.install(archive_bytes, Path("instances/My Pack"))
    """

    def __init__(
        self,
        mode: InstallMode = InstallMode.REPLACE,
        work_dir: Optional[str | Path] = None,
    ):
        self.mode = mode
        self.work_dir = Path(work_dir) if work_dir is not None else None

    # ── Public entry point ─────────────────────────────────────────

    def install(self, archive: bytes, destination: str | Path) -> InstallReport:
        """
        Replace the contents of ``destination`` with the entries of ``archive``.

        Raises:
            FilesystemError: Any create, delete, write or extract step failed.
        """
        destination = Path(destination)
        if destination.exists() and not destination.is_dir():
            raise FilesystemError(
                f"{destination} exists and is not a directory",
                step="Preparing target directory",
            )

        archive_path = self._write_temp_archive(archive)
        try:
            if self.mode is InstallMode.SWAP:
                entries = self._install_swap(archive_path, destination)
            else:
                entries = self._install_replace(archive_path, destination)
        finally:
            self._remove_temp_archive(archive_path)

        logger.info("Installed %d entries into %s", entries, destination)
        return InstallReport(destination=destination, entries=entries, mode=self.mode)

    # ── Replace in place ───────────────────────────────────────────

    def _install_replace(self, archive_path: Path, destination: Path) -> int:
        if destination.exists():
            try:
                removed = clear_directory(destination)
            except OSError as e:
                raise FilesystemError(
                    f"Failed to clean target directory {destination}: {e}",
                    step="Cleaning target directory",
                ) from e
            logger.info("Removed %d entries from %s", removed, destination)
        else:
            try:
                destination.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FilesystemError(
                    f"Failed to create target directory {destination}: {e}",
                    step="Creating target directory",
                ) from e
            logger.info("Created %s", destination)

        return extract_archive(archive_path, destination)

    # ── Atomic swap ────────────────────────────────────────────────

    def _install_swap(self, archive_path: Path, destination: Path) -> int:
        parent = destination.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
            staging = Path(
                tempfile.mkdtemp(dir=parent, prefix=f".{destination.name}.staging-")
            )
            # mkdtemp creates 0700; give the new instance the mode a plain mkdir
            # (or the instance being replaced) would have.
            os.chmod(staging, _directory_mode(destination))
        except OSError as e:
            raise FilesystemError(
                f"Failed to create staging directory in {parent}: {e}",
                step="Creating staging directory",
            ) from e

        try:
            entries = extract_archive(archive_path, staging)
            _swap_into_place(staging, destination)
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise
        return entries

    # ── Temporary archive file ─────────────────────────────────────

    def _write_temp_archive(self, archive: bytes) -> Path:
        try:
            fd, name = tempfile.mkstemp(suffix=".zip", dir=self.work_dir)
            with os.fdopen(fd, "wb") as fp:
                fp.write(archive)
        except OSError as e:
            raise FilesystemError(
                f"Failed to write temporary file: {e}", step="Writing temporary file"
            ) from e
        logger.debug("Wrote %d bytes to %s", len(archive), name)
        return Path(name)

    @staticmethod
    def _remove_temp_archive(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise FilesystemError(
                f"Failed to remove temporary file {path}: {e}",
                step="Removing temporary file",
            ) from e


def clear_directory(path: Path) -> int:
    """Delete everything inside ``path`` but keep ``path`` itself."""
    count = 0
    for entry in path.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()
        count += 1
    return count


def extract_archive(archive_path: Path, destination: Path) -> int:
    """
    Extract every entry of a zip file into ``destination``.

    Entry paths are kept as stored; :meth:`zipfile.ZipFile.extractall`
    drops absolute prefixes and ``..`` components.
    """
    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            names = zf.namelist()
            zf.extractall(destination)
    except zipfile.BadZipFile as e:
        raise FilesystemError(
            f"Failed to open ZIP archive: {e}", step="Extracting archive"
        ) from e
    except OSError as e:
        raise FilesystemError(
            f"Failed to extract ZIP archive into {destination}: {e}",
            step="Extracting archive",
        ) from e
    return len(names)


def _directory_mode(destination: Path) -> int:
    """Permission bits for a directory replacing ``destination``."""
    if destination.is_dir():
        return stat.S_IMODE(destination.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o777 & ~umask


def _swap_into_place(staging: Path, destination: Path) -> None:
    """Rename ``staging`` to ``destination``, restoring the old one on failure."""
    backup: Optional[Path] = None
    step = "Replacing target directory"
    try:
        if destination.exists():
            backup = destination.with_name(
                f".{destination.name}.backup-{os.getpid()}-{time.time_ns()}"
            )
            os.rename(destination, backup)
        os.rename(staging, destination)
    except OSError as e:
        if backup is not None and backup.exists() and not destination.exists():
            try:
                os.rename(backup, destination)
            except OSError as restore_error:
                logger.error(
                    "Could not restore %s from %s: %s", destination, backup, restore_error
                )
        raise FilesystemError(f"Failed to move new instance into place: {e}", step=step) from e

    if backup is not None:
        try:
            shutil.rmtree(backup)
        except OSError as e:
            raise FilesystemError(
                f"Installed, but failed to remove old instance at {backup}: {e}", step=step
            ) from e
