"""
Runtime settings.

Values come from defaults, then environment variables (a ``.env`` file in the
working directory is loaded first), then CLI options layered on top with
:meth:`Settings.with_overrides`.
"""

from __future__ import annotations

import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from modpack_updater.errors import ConfigError

DEFAULT_OWNER = "thebearodactyl"
DEFAULT_REPO = "originalife-s4"
DEFAULT_INSTANCE_NAME = "Originalife Season 4"
DEFAULT_ASSET_PREFIX = "updated-pack"
CACHE_DIR_NAME = "originalife_s4_cache"

ENV_PREFIX = "MODPACK_UPDATER_"


class ChecksumPolicy(str, Enum):
    """Where the expected SHA-256 of an asset comes from."""

    SKIP = "skip"
    NAME = "name"  # first 64 characters of the asset name
    FIELD = "field"  # the ``digest`` field of the release asset


class CachePolicy(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


class InstallMode(str, Enum):
    """How the instance directory is replaced."""

    REPLACE = "replace"  # clear in place, then extract
    SWAP = "swap"  # extract into a staging sibling, then rename over


def default_cache_dir() -> Path:
    return Path(tempfile.gettempdir()) / CACHE_DIR_NAME


class Settings(BaseModel):
    owner: str = DEFAULT_OWNER
    repo: str = DEFAULT_REPO
    instance_name: str = DEFAULT_INSTANCE_NAME
    asset_prefix: str = DEFAULT_ASSET_PREFIX
    checksum_policy: ChecksumPolicy = ChecksumPolicy.FIELD
    cache_policy: CachePolicy = CachePolicy.ENABLED
    cache_dir: Path = Field(default_factory=default_cache_dir)
    install_mode: InstallMode = InstallMode.REPLACE
    timeout: float = Field(default=30.0, gt=0)
    github_token: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        """
        Build settings from environment variables.

        When ``environ`` is omitted, ``.env`` is loaded into ``os.environ``
        and the process environment is used.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        fields = {
            "owner": "OWNER",
            "repo": "REPO",
            "instance_name": "INSTANCE",
            "asset_prefix": "ASSET_PREFIX",
            "checksum_policy": "CHECKSUM",
            "cache_policy": "CACHE",
            "cache_dir": "CACHE_DIR",
            "install_mode": "INSTALL_MODE",
            "timeout": "TIMEOUT",
        }
        values: dict[str, str] = {}
        for field, suffix in fields.items():
            raw = environ.get(ENV_PREFIX + suffix)
            if raw:
                values[field] = raw.strip()
        token = environ.get("GITHUB_TOKEN")
        if token:
            values["github_token"] = token.strip()

        return cls.parse(values)

    @classmethod
    def parse(cls, values: Mapping[str, object]) -> Settings:
        """Validate raw values, turning pydantic errors into :class:`ConfigError`."""
        try:
            return cls.model_validate(dict(values))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigError(problems, step="Loading settings") from e

    def with_overrides(self, **overrides: object) -> Settings:
        """Return a copy with every non-``None`` override applied and validated."""
        update = {k: v for k, v in overrides.items() if v is not None}
        if not update:
            return self
        return self.parse({**self.model_dump(), **update})
