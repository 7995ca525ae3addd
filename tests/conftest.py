"""Shared fixtures: fake releases, zip archives and an in-memory GitHub."""

from __future__ import annotations

import hashlib
import io
import zipfile
from typing import Callable, Optional

import httpx
import pytest

from modpack_updater.models import Release, ReleaseAsset

DOWNLOAD_BASE = "https://github.com/thebearodactyl/originalife-s4/releases/download/v1.0"


def make_zip(files: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buf.getvalue()


def make_asset(name: str, content: bytes, digest: Optional[str] = "auto") -> ReleaseAsset:
    if digest == "auto":
        digest = "sha256:" + hashlib.sha256(content).hexdigest()
    return ReleaseAsset(
        name=name,
        browser_download_url=f"{DOWNLOAD_BASE}/{name}",
        size=len(content),
        digest=digest,
    )


def release_payload(assets: dict[str, bytes], tag: str = "v1.0") -> dict:
    """A ``/releases/latest`` JSON body with one asset per entry."""
    return {
        "tag_name": tag,
        "name": f"Originalife {tag}",
        "html_url": f"https://github.com/thebearodactyl/originalife-s4/releases/tag/{tag}",
        "published_at": "2024-05-01T12:00:00Z",
        "assets": [
            {
                "name": name,
                "browser_download_url": f"{DOWNLOAD_BASE}/{name}",
                "size": len(content),
                "digest": "sha256:" + hashlib.sha256(content).hexdigest(),
                "content_type": "application/zip",
            }
            for name, content in assets.items()
        ],
    }


class FakeGitHub:
    """
    ``httpx.MockTransport`` handler serving one release and its downloads.

    ``requests`` records every URL requested so tests can assert on traffic.
    """

    def __init__(self, assets: dict[str, bytes], tag: str = "v1.0"):
        self.assets = assets
        self.tag = tag
        self.requests: list[str] = []
        self.latest_status = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(str(request.url))
        path = request.url.path
        if path.endswith("/releases/latest"):
            if self.latest_status != 200:
                return httpx.Response(self.latest_status, json={"message": "nope"})
            return httpx.Response(200, json=release_payload(self.assets, self.tag))
        name = path.rsplit("/", 1)[-1]
        if name in self.assets:
            return httpx.Response(200, content=self.assets[name])
        return httpx.Response(404)

    @property
    def downloads(self) -> list[str]:
        return [u for u in self.requests if "/releases/download/" in u]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def offline_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network is unreachable", request=request)

    return httpx.MockTransport(handler)


def serving(content: bytes) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=content)

    return handler


@pytest.fixture
def pack_zip() -> bytes:
    return make_zip(
        {
            "mods/create.jar": b"create",
            "config/create-common.toml": b"[common]\n",
            "options.txt": b"fov:90\n",
        }
    )


@pytest.fixture
def release_with(pack_zip) -> Release:
    payload = release_payload(
        {
            "updated-pack-modrinth.zip": pack_zip,
            "updated-pack-curseforge.zip": pack_zip,
        }
    )
    return Release.model_validate(payload)


@pytest.fixture
def windows_env(tmp_path) -> dict[str, str]:
    return {
        "APPDATA": str(tmp_path / "AppData" / "Roaming"),
        "HOMEDRIVE": str(tmp_path / "drive"),
        "HOMEPATH": "/Users/steve",
    }
