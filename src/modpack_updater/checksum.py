"""
SHA-256 helpers and expected-checksum derivation.

Which checksum an asset is verified against depends on the
:class:`~modpack_updater.config.ChecksumPolicy`:

  - ``skip``: none, content is trusted as downloaded
  - ``name``: the asset name starts with the 64-character hex digest
  - ``field``: the ``digest`` GitHub reports for the asset
"""

from __future__ import annotations

import hashlib
import string
from typing import Optional

from modpack_updater.config import ChecksumPolicy
from modpack_updater.errors import IntegrityError
from modpack_updater.models import ReleaseAsset

SHA256_HEX_LENGTH = 64
_HEX_DIGITS = frozenset(string.hexdigits)


def sha256_hex(data: bytes) -> str:
    """Lowercase hex SHA-256 of ``data``."""
    return hashlib.sha256(data).hexdigest()


def is_sha256_hex(value: str) -> bool:
    return len(value) == SHA256_HEX_LENGTH and all(c in _HEX_DIGITS for c in value)


def checksum_from_name(name: str) -> str:
    """
    Take the digest embedded at the start of an asset name.

    Raises:
        IntegrityError: The name does not start with 64 hex characters.
    """
    prefix = name[:SHA256_HEX_LENGTH]
    if not is_sha256_hex(prefix):
        raise IntegrityError(
            f"Asset name '{name}' does not start with a SHA-256 digest",
            step="Reading checksum",
        )
    return prefix.lower()


def expected_checksum(asset: ReleaseAsset, policy: ChecksumPolicy) -> Optional[str]:
    """
    Return the lowercase hex SHA-256 ``asset`` must match, or ``None`` to skip.

    Raises:
        IntegrityError: The policy requires a checksum the asset does not carry.
    """
    if policy is ChecksumPolicy.SKIP:
        return None
    if policy is ChecksumPolicy.NAME:
        return checksum_from_name(asset.name)

    digest = asset.sha256
    if digest is None or not is_sha256_hex(digest):
        raise IntegrityError(
            f"Asset '{asset.name}' has no SHA-256 digest (got {asset.digest!r})",
            step="Reading checksum",
        )
    return digest
