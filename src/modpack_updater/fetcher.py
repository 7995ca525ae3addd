"""
Download release assets with checksum verification and caching.

Flow for :meth:`ContentFetcher.fetch`:
  1. Work out the expected SHA-256 from the checksum policy
  2. Return the cached copy if one exists for ``(checksum, name)``
  3. Otherwise stream the asset, showing a byte progress bar
  4. Verify size and SHA-256 of the complete body
  5. Store verified content in the cache and return it
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from tqdm import tqdm

from modpack_updater.cache import CacheStore
from modpack_updater.checksum import expected_checksum, sha256_hex
from modpack_updater.config import ChecksumPolicy
from modpack_updater.errors import IntegrityError, NetworkError
from modpack_updater.models import CacheKey, ReleaseAsset

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
PROGRESS_FORMAT = (
    "{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} "
    "[{elapsed}<{remaining}, {rate_fmt}]"
)


class ContentFetcher:
    """
    Fetch the bytes of a release asset.

    Usage::

        async with httpx.AsyncClient() as client:
            fetcher = ContentFetcher(client, cache=CacheStore(cache_dir))
            data = await fetcher.fetch(asset)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: Optional[CacheStore] = None,
        checksum_policy: ChecksumPolicy = ChecksumPolicy.FIELD,
        progress: bool = True,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self._client = client
        self.cache = cache
        self.checksum_policy = checksum_policy
        self._progress = progress
        self._chunk_size = chunk_size
        self.last_from_cache = False

    async def fetch(self, asset: ReleaseAsset) -> bytes:
        """
        Return the verified content of ``asset``.

        Raises:
            IntegrityError: Checksum unavailable under the policy, or the
                downloaded body does not match the declared size or digest.
            NetworkError: The download failed.
            FilesystemError: The cache could not be read or written.
        """
        self.last_from_cache = False
        checksum = expected_checksum(asset, self.checksum_policy)

        key: Optional[CacheKey] = None
        if checksum is not None and self.cache is not None:
            key = CacheKey(checksum, asset.name)
            cached = self.cache.get(key)
            if cached is not None:
                logger.info("Using cached file %s", self.cache.path_for(key))
                self.last_from_cache = True
                return cached

        content = await self._download(asset)
        self._verify(asset, content, checksum)

        if key is not None and self.cache is not None:
            self.cache.put(key, content)
        return content

    # ── Download ───────────────────────────────────────────────────

    async def _download(self, asset: ReleaseAsset) -> bytes:
        step = f"Downloading {asset.name}"
        logger.info("Downloading %s from %s", asset.name, asset.url)
        content = bytearray()
        pbar = tqdm(
            total=asset.size or None,
            desc=asset.name,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            bar_format=PROGRESS_FORMAT if asset.size else None,
            disable=not self._progress,
        )
        try:
            async with self._client.stream("GET", asset.url) as resp:
                if resp.is_error:
                    raise NetworkError(
                        f"Server returned HTTP {resp.status_code} for {asset.url}",
                        step=step,
                    )
                async for chunk in resp.aiter_bytes(self._chunk_size):
                    content.extend(chunk)
                    pbar.update(len(chunk))
        except httpx.HTTPError as e:
            raise NetworkError(f"Transfer of {asset.url} failed: {e}", step=step) from e
        finally:
            pbar.close()

        logger.debug("Received %d bytes for %s", len(content), asset.name)
        return bytes(content)

    # ── Verification ───────────────────────────────────────────────

    @staticmethod
    def _verify(asset: ReleaseAsset, content: bytes, checksum: Optional[str]) -> None:
        step = f"Verifying {asset.name}"
        if asset.size and len(content) != asset.size:
            raise IntegrityError(
                f"Expected {asset.size} bytes but received {len(content)}", step=step
            )
        if checksum is None:
            logger.warning("No checksum for %s; skipping verification", asset.name)
            return

        actual = sha256_hex(content)
        if actual != checksum:
            raise IntegrityError(
                f"SHA256 mismatch for downloaded file\n"
                f"  Expected: {checksum}\n"
                f"  Actual:   {actual}",
                step=step,
            )
        logger.debug("SHA256 verified for %s: %s", asset.name, actual)
