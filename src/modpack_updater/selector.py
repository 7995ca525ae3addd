"""
Pick the release asset that matches the user's launcher.

Each release ships one archive per launcher, named
``<prefix>-<flavor>.zip`` (e.g. ``updated-pack-curseforge.zip``).
"""

from __future__ import annotations

import logging

from modpack_updater.config import DEFAULT_ASSET_PREFIX
from modpack_updater.errors import AssetNotFoundError
from modpack_updater.models import Launcher, Release, ReleaseAsset

logger = logging.getLogger(__name__)


def launcher_for_choice(choice: str) -> Launcher:
    """
    Map a menu choice to a launcher.

    ``"1"`` or ``"modrinth"`` is Modrinth, ``"2"`` or ``"curseforge"`` is
    CurseForge and anything else falls back to Prism. Names are matched
    case-insensitively, as in :func:`~modpack_updater.paths.launcher_for_strict_choice`.
    """
    key = choice.strip().lower()
    if key in ("1", Launcher.MODRINTH.value):
        return Launcher.MODRINTH
    if key in ("2", Launcher.CURSEFORGE.value):
        return Launcher.CURSEFORGE
    return Launcher.PRISM


def asset_name_for(launcher: Launcher, prefix: str = DEFAULT_ASSET_PREFIX) -> str:
    return f"{prefix}-{launcher.flavor}.zip"


def select_asset(
    release: Release, choice: str, prefix: str = DEFAULT_ASSET_PREFIX
) -> ReleaseAsset:
    """
    Return the asset of ``release`` for the launcher picked by ``choice``.

    Raises:
        AssetNotFoundError: The release has no asset with the expected name.
    """
    name = asset_name_for(launcher_for_choice(choice), prefix)
    asset = release.find_asset(name)
    if asset is None:
        logger.debug(
            "Assets in %s: %s", release.tag_name, ", ".join(a.name for a in release.assets)
        )
        raise AssetNotFoundError(name, release.tag_name)
    logger.info("Selected asset %s (%d bytes)", asset.name, asset.size)
    return asset
