"""
End-to-end update flow.

  1. Look up the latest release
  2. Pick the asset for the chosen launcher
  3. Resolve the instance directory
  4. Fetch (cached or downloaded) and verify the archive
  5. Replace the instance directory with the archive contents

Each step runs to completion before the next starts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import httpx

from modpack_updater.api import GitHubReleases
from modpack_updater.cache import CacheStore
from modpack_updater.config import CachePolicy, Settings
from modpack_updater.fetcher import ContentFetcher
from modpack_updater.installer import Installer
from modpack_updater.paths import resolve
from modpack_updater.selector import select_asset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateResult:
    tag: str
    asset_name: str
    destination: Path
    size: int
    from_cache: bool
    entries: int


class ModpackUpdater:
    """
    Wire the release client, fetcher and installer together for one run.

    Usage::

        async with ModpackUpdater(Settings.from_env()) as updater:
            result = await updater.run("2")
    """

    def __init__(
        self,
        settings: Settings,
        environ: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        progress: bool = True,
    ):
        self.settings = settings
        self._environ = environ
        self.releases = GitHubReleases(
            token=settings.github_token,
            timeout=settings.timeout,
            transport=transport,
        )
        self._download_client = httpx.AsyncClient(
            timeout=settings.timeout,
            follow_redirects=True,
            transport=transport,
        )
        cache = None
        if settings.cache_policy is CachePolicy.ENABLED:
            cache = CacheStore(settings.cache_dir)
        self.fetcher = ContentFetcher(
            self._download_client,
            cache=cache,
            checksum_policy=settings.checksum_policy,
            progress=progress,
        )
        self.installer = Installer(mode=settings.install_mode)

    async def __aenter__(self) -> ModpackUpdater:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        await self.releases.close()
        await self._download_client.aclose()

    def destination_for(self, choice: str) -> Path:
        return resolve(choice, self.settings.instance_name, self._environ)

    async def run(self, choice: str) -> UpdateResult:
        """
        Update the instance for the launcher picked by ``choice``.

        Raises:
            AssetNotFoundError: The release has no archive for the launcher.
            UpdaterError: Any other failure, with the failing step attached.
        """
        s = self.settings
        release = await self.releases.get_latest_release(s.owner, s.repo)
        asset = select_asset(release, choice, s.asset_prefix)
        destination = self.destination_for(choice)
        logger.info("Installing %s %s into %s", release.tag_name, asset.name, destination)

        content = await self.fetcher.fetch(asset)
        report = self.installer.install(content, destination)

        return UpdateResult(
            tag=release.tag_name,
            asset_name=asset.name,
            destination=destination,
            size=len(content),
            from_cache=self.fetcher.last_from_cache,
            entries=report.entries,
        )
