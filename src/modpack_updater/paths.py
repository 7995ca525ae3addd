"""
Locate a launcher's instance directory.

Launchers keep their instances under per-user directories described by
Windows environment variables:

  - Modrinth:   ``%APPDATA%/ModrinthApp/profiles``
  - CurseForge: ``%HOMEDRIVE%%HOMEPATH%/curseforge/minecraft/Instances``
  - Prism:      ``%APPDATA%/PrismLauncher/instances``
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from modpack_updater.errors import EnvironmentVariableError, InvalidChoiceError
from modpack_updater.models import Launcher

_STRICT_CHOICES = {
    "1": Launcher.MODRINTH,
    "2": Launcher.CURSEFORGE,
    "3": Launcher.PRISM,
}


def launcher_for_strict_choice(choice: str) -> Launcher:
    """
    Map ``"1"``/``"2"``/``"3"`` or a launcher name to a launcher.

    Unlike asset selection there is no fallback here.

    Raises:
        InvalidChoiceError: ``choice`` names no launcher.
    """
    key = choice.strip().lower()
    if key in _STRICT_CHOICES:
        return _STRICT_CHOICES[key]
    try:
        return Launcher(key)
    except ValueError:
        raise InvalidChoiceError(choice) from None


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if not value:
        raise EnvironmentVariableError(name)
    return value


def profiles_root(launcher: Launcher, environ: Optional[Mapping[str, str]] = None) -> Path:
    """Directory holding all of ``launcher``'s instances."""
    if environ is None:
        environ = os.environ

    if launcher is Launcher.MODRINTH:
        return Path(_require(environ, "APPDATA")) / "ModrinthApp" / "profiles"
    if launcher is Launcher.CURSEFORGE:
        # HOMEDRIVE is "C:" and HOMEPATH is "\Users\name"; they only form a
        # path when concatenated.
        home = _require(environ, "HOMEDRIVE") + _require(environ, "HOMEPATH")
        return Path(home) / "curseforge" / "minecraft" / "Instances"
    return Path(_require(environ, "APPDATA")) / "PrismLauncher" / "instances"


def resolve(
    choice: str,
    instance_name: str,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """
    Return the install directory for ``choice``. Nothing on disk is touched.

    Raises:
        InvalidChoiceError: Unknown launcher choice.
        EnvironmentVariableError: A required variable is unset.
    """
    launcher = launcher_for_strict_choice(choice)
    return profiles_root(launcher, environ) / instance_name
