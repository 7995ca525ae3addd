"""Tests for the on-disk download cache."""

from modpack_updater.cache import CacheStore
from modpack_updater.config import default_cache_dir
from modpack_updater.models import CacheKey

KEY = CacheKey("ab" * 32, "updated-pack-prism.zip")


class TestCacheStore:
    def test_miss(self, tmp_path):
        store = CacheStore(tmp_path / "cache")
        assert store.get(KEY) is None
        assert not store.contains(KEY)

    def test_put_then_get(self, tmp_path):
        store = CacheStore(tmp_path / "cache")
        path = store.put(KEY, b"zip bytes")
        assert path == tmp_path / "cache" / KEY.filename
        assert store.contains(KEY)
        assert store.get(KEY) == b"zip bytes"

    def test_no_leftover_temp_files(self, tmp_path):
        store = CacheStore(tmp_path)
        store.put(KEY, b"data")
        assert [p.name for p in tmp_path.iterdir()] == [KEY.filename]

    def test_keys_with_different_checksums_are_separate(self, tmp_path):
        store = CacheStore(tmp_path)
        other = CacheKey("cd" * 32, KEY.asset_name)
        store.put(KEY, b"old")
        store.put(other, b"new")
        assert store.get(KEY) == b"old"
        assert store.get(other) == b"new"

    def test_default_dir_name(self):
        assert default_cache_dir().name == "originalife_s4_cache"
