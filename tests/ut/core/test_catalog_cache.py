"""版本目录缓存测试 - 15 分钟有效期 + 原子刷新"""

from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from conftest import CATALOG_URL, FakeFetcher
from cvm.core.catalog import CatalogCache
from cvm.core.exceptions import FetchError


def _write_cache(path: Path, content: bytes, age_seconds: float) -> None:
    path.write_bytes(content)
    mtime = time.time() - age_seconds
    os.utime(path, (mtime, mtime))


class TestCatalogCache:
    def test_fresh_cache_served_unchanged(self, tmp_path: Path) -> None:
        """14 分钟前写入的缓存原样返回，不访问网络"""
        cache_file = tmp_path / "versions.json"
        _write_cache(cache_file, b"cached", age_seconds=14 * 60)
        fetcher = FakeFetcher({CATALOG_URL: b"remote"})

        assert CatalogCache(cache_file, fetcher).fetch(CATALOG_URL) == b"cached"
        assert fetcher.calls == []

    def test_stale_cache_refreshed(self, tmp_path: Path) -> None:
        """16 分钟前写入的缓存触发刷新"""
        cache_file = tmp_path / "versions.json"
        _write_cache(cache_file, b"cached", age_seconds=16 * 60)
        fetcher = FakeFetcher({CATALOG_URL: b"remote"})

        assert CatalogCache(cache_file, fetcher).fetch(CATALOG_URL) == b"remote"
        assert fetcher.calls == [CATALOG_URL]
        assert cache_file.read_bytes() == b"remote"

    def test_age_equal_to_ttl_is_stale(self, tmp_path: Path) -> None:
        cache_file = tmp_path / "versions.json"
        cache_file.write_bytes(b"cached")
        mtime = cache_file.stat().st_mtime
        fetcher = FakeFetcher({CATALOG_URL: b"remote"})
        cache = CatalogCache(cache_file, fetcher, ttl=60, clock=lambda: mtime + 60)
        assert not cache.is_fresh()

    def test_missing_cache_fetched(self, tmp_path: Path) -> None:
        cache_file = tmp_path / "sub" / "versions.json"
        fetcher = FakeFetcher({CATALOG_URL: b"remote"})

        assert CatalogCache(cache_file, fetcher).fetch(CATALOG_URL) == b"remote"
        assert cache_file.read_bytes() == b"remote"

    def test_failure_without_cache_raises(self, tmp_path: Path) -> None:
        cache_file = tmp_path / "versions.json"
        with pytest.raises(FetchError):
            CatalogCache(cache_file, FakeFetcher()).fetch(CATALOG_URL)
        assert not cache_file.exists()
        assert list(tmp_path.iterdir()) == []

    def test_failure_with_stale_cache_propagates(self, tmp_path: Path) -> None:
        """刷新失败不回退到过期缓存，旧缓存文件保持不变"""
        cache_file = tmp_path / "versions.json"
        _write_cache(cache_file, b"stale", age_seconds=60 * 60)

        with pytest.raises(FetchError):
            CatalogCache(cache_file, FakeFetcher()).fetch(CATALOG_URL)
        assert cache_file.read_bytes() == b"stale"
        assert [p.name for p in tmp_path.iterdir()] == ["versions.json"]

    def test_invalidate(self, tmp_path: Path) -> None:
        cache_file = tmp_path / "versions.json"
        cache_file.write_bytes(b"x")
        cache = CatalogCache(cache_file, FakeFetcher())
        assert cache.invalidate() is True
        assert cache.invalidate() is False
