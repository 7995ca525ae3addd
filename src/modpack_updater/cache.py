"""
On-disk cache of verified downloads.

Entries live at ``<root>/<checksum>-<asset name>`` and are never expired.
Only content whose SHA-256 matched is stored, so a hit is returned without
re-verification.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from modpack_updater.errors import FilesystemError
from modpack_updater.models import CacheKey

logger = logging.getLogger(__name__)


class CacheStore:
    """Keyed byte storage under a single directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path_for(self, key: CacheKey) -> Path:
        return self.root / key.filename

    def contains(self, key: CacheKey) -> bool:
        return self.path_for(key).is_file()

    def get(self, key: CacheKey) -> Optional[bytes]:
        path = self.path_for(key)
        if not path.is_file():
            return None
        try:
            data = path.read_bytes()
        except OSError as e:
            raise FilesystemError(
                f"Failed to read cached file {path}: {e}", step="Reading cache"
            ) from e
        logger.debug("Cache hit: %s (%d bytes)", path.name, len(data))
        return data

    def put(self, key: CacheKey, data: bytes) -> Path:
        """Store ``data`` under ``key``; readers never observe a partial file."""
        path = self.path_for(key)
        tmp_name: Optional[str] = None
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.root, prefix=f".{key.asset_name}.", suffix=".part"
            )
            with os.fdopen(fd, "wb") as fp:
                fp.write(data)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise FilesystemError(
                f"Failed to write cache file {path}: {e}", step="Writing cache"
            ) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.debug("Cached %s (%d bytes)", path.name, len(data))
        return path
