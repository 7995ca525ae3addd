"""
modpack-updater: install the latest modpack release into a Minecraft launcher.

Fetch the newest GitHub release, download the archive for Modrinth,
CurseForge or Prism, verify it and unpack it into the launcher's instance
directory.
"""

from modpack_updater.models import CacheKey, Launcher, Release, ReleaseAsset
from modpack_updater.config import (
    CachePolicy,
    ChecksumPolicy,
    InstallMode,
    Settings,
)
from modpack_updater.errors import (
    AssetNotFoundError,
    AuthError,
    ConfigError,
    EnvironmentVariableError,
    FilesystemError,
    IntegrityError,
    InvalidChoiceError,
    NetworkError,
    NotFoundError,
    UpdaterError,
)
from modpack_updater.api import GitHubReleases
from modpack_updater.cache import CacheStore
from modpack_updater.fetcher import ContentFetcher
from modpack_updater.installer import Installer, InstallReport
from modpack_updater.paths import resolve
from modpack_updater.selector import asset_name_for, select_asset
from modpack_updater.updater import ModpackUpdater, UpdateResult

__all__ = [
    "CacheKey",
    "Launcher",
    "Release",
    "ReleaseAsset",
    "CachePolicy",
    "ChecksumPolicy",
    "InstallMode",
    "Settings",
    "AssetNotFoundError",
    "AuthError",
    "ConfigError",
    "EnvironmentVariableError",
    "FilesystemError",
    "IntegrityError",
    "InvalidChoiceError",
    "NetworkError",
    "NotFoundError",
    "UpdaterError",
    "GitHubReleases",
    "CacheStore",
    "ContentFetcher",
    "Installer",
    "InstallReport",
    "resolve",
    "asset_name_for",
    "select_asset",
    "ModpackUpdater",
    "UpdateResult",
]

__version__ = "0.1.0"
