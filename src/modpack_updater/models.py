"""
Pydantic data models for GitHub releases and launcher targets.

Field names follow the GitHub REST API (``tag_name``, ``browser_download_url``,
``digest``) so responses validate directly.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, Field


# ── Release models (GitHub API responses) ──────────────────────────


class ReleaseAsset(BaseModel):
    """
    A downloadable file attached to a release.

    ``digest`` is GitHub's ``"<algo>:<hex>"`` string and may be absent on
    assets uploaded before GitHub started computing digests.
    """

    name: str
    url: str = Field(alias="browser_download_url")
    size: int = 0
    digest: Optional[str] = None
    content_type: Optional[str] = None

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def sha256(self) -> Optional[str]:
        """Lowercase SHA-256 hex from ``digest``, or ``None``."""
        if not self.digest:
            return None
        algo, _, value = self.digest.partition(":")
        if algo.lower() != "sha256" or not value:
            return None
        return value.lower()


class Release(BaseModel):
    """A published release and its assets, in API order."""

    tag_name: str
    name: Optional[str] = None
    html_url: Optional[str] = None
    published_at: Optional[datetime] = None
    assets: tuple[ReleaseAsset, ...] = ()

    model_config = {"populate_by_name": True, "frozen": True}

    def find_asset(self, name: str) -> Optional[ReleaseAsset]:
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None


# ── Launchers ──────────────────────────────────────────────────────


class Launcher(str, Enum):
    """Game launchers an instance can be installed into."""

    MODRINTH = "modrinth"
    CURSEFORGE = "curseforge"
    PRISM = "prism"

    @property
    def flavor(self) -> str:
        """Suffix used in the asset name for this launcher."""
        return self.value

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Launcher.MODRINTH: "Modrinth",
    Launcher.CURSEFORGE: "CurseForge",
    Launcher.PRISM: "Prism",
}


# ── Cache ──────────────────────────────────────────────────────────


class CacheKey(NamedTuple):
    """Identifies a verified download in the cache."""

    checksum: str
    asset_name: str

    @property
    def filename(self) -> str:
        return f"{self.checksum}-{self.asset_name}"
