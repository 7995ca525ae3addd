"""Tests for the GitHub releases client."""

import httpx
import pytest

from modpack_updater.api import GitHubReleases
from modpack_updater.errors import AuthError, NetworkError, NotFoundError

from conftest import FakeGitHub, offline_transport, release_payload


def _client(handler, token="") -> GitHubReleases:
    return GitHubReleases(token=token, transport=httpx.MockTransport(handler))


class TestLatestRelease:
    async def test_parses_release(self):
        github = FakeGitHub({"updated-pack-modrinth.zip": b"m", "updated-pack-curseforge.zip": b"c"})
        async with GitHubReleases(token="", transport=github.transport()) as gh:
            release = await gh.get_latest_release("thebearodactyl", "originalife-s4")
        assert release.tag_name == "v1.0"
        assert len(release.assets) == 2
        assert github.requests == [
            "https://api.github.com/repos/thebearodactyl/originalife-s4/releases/latest"
        ]

    async def test_token_header(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, json=release_payload({}))

        async with _client(handler, token="ghp_secret") as gh:
            await gh.get_latest_release("o", "r")
        assert seen["authorization"] == "Bearer ghp_secret"
        assert seen["accept"] == "application/vnd.github+json"

    async def test_no_token_no_header(self, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, json=release_payload({}))

        async with _client(handler) as gh:
            await gh.get_latest_release("o", "r")
        assert "authorization" not in seen


class TestErrorMapping:
    async def test_not_found(self):
        async with _client(lambda r: httpx.Response(404)) as gh:
            with pytest.raises(NotFoundError):
                await gh.get_latest_release("o", "r")

    @pytest.mark.parametrize("status", [401, 403, 429])
    async def test_denied(self, status):
        async with _client(lambda r: httpx.Response(status)) as gh:
            with pytest.raises(AuthError):
                await gh.get_latest_release("o", "r")

    async def test_rate_limit_mentions_reset(self):
        headers = {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"}
        async with _client(lambda r: httpx.Response(403, headers=headers)) as gh:
            with pytest.raises(AuthError, match="rate limit exceeded.*2023-11-14"):
                await gh.get_latest_release("o", "r")

    async def test_server_error(self):
        async with _client(lambda r: httpx.Response(502)) as gh:
            with pytest.raises(NetworkError, match="HTTP 502"):
                await gh.get_latest_release("o", "r")

    async def test_transport_error(self):
        async with GitHubReleases(token="", transport=offline_transport()) as gh:
            with pytest.raises(NetworkError) as exc:
                await gh.get_latest_release("o", "r")
        assert exc.value.step == "Fetching latest release of o/r"
        assert isinstance(exc.value.__cause__, httpx.ConnectError)


class TestMalformedResponses:
    async def test_non_json_body(self):
        async with _client(lambda r: httpx.Response(200, text="<html>proxy</html>")) as gh:
            with pytest.raises(NetworkError, match="not JSON") as exc:
                await gh.get_latest_release("o", "r")
        assert exc.value.step == "Fetching latest release of o/r"

    async def test_payload_missing_tag(self):
        async with _client(lambda r: httpx.Response(200, json={"assets": []})) as gh:
            with pytest.raises(NetworkError, match="tag_name") as exc:
                await gh.get_latest_release("o", "r")
        assert exc.value.step == "Fetching latest release of o/r"

    async def test_payload_not_an_object(self):
        async with _client(lambda r: httpx.Response(200, json=["v1.0"])) as gh:
            with pytest.raises(NetworkError, match="Unexpected release payload"):
                await gh.get_latest_release("o", "r")

    async def test_redirect_loop(self):
        def handler(request):
            return httpx.Response(302, headers={"Location": str(request.url)})

        async with _client(handler) as gh:
            with pytest.raises(NetworkError) as exc:
                await gh.get_latest_release("o", "r")
        assert isinstance(exc.value.__cause__, httpx.TooManyRedirects)
