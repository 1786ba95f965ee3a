"""本地仓库测试 - 枚举、下载、删除、旧文件名迁移"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from conftest import FakeFetcher
from cvm.core.exceptions import FetchError, InvalidArgumentError, NotInstalledError
from cvm.core.store import LocalStore
from cvm.core.store.naming import format_canonical_name, parse_canonical_name, parse_legacy_name


def _touch(store: LocalStore, *names: str) -> None:
    for name in names:
        (store.packages_dir / name).write_bytes(name.encode())


class TestNaming:
    def test_canonical_name(self) -> None:
        assert format_canonical_name("0.40.4") == "cursor-0.40.4.AppImage"
        assert parse_canonical_name(format_canonical_name("0.40.4")) == "0.40.4"

    def test_not_canonical(self) -> None:
        assert parse_canonical_name("cursor-0.40.4-build-123-x86_64.AppImage") is None
        assert parse_canonical_name("readme.txt") is None

    def test_legacy_name(self) -> None:
        assert parse_legacy_name("cursor-0.42.3-build-241016kxu9umuir-x86_64.AppImage") == "0.42.3"
        assert parse_legacy_name("cursor-0.42.3.AppImage") is None

    def test_format_rejects_empty(self) -> None:
        with pytest.raises(InvalidArgumentError):
            format_canonical_name("")


class TestNormalize:
    def test_rename_and_remove(self, store: LocalStore) -> None:
        _touch(
            store,
            "cursor-0.42.3-build-aaa-x86_64.AppImage",
            "cursor-0.41.0-build-bbb-x86_64.AppImage",
            "cursor-0.41.0.AppImage",
        )
        changes = store.normalize()
        assert sorted(changes) == [
            ("removed", "cursor-0.41.0-build-bbb-x86_64.AppImage"),
            ("renamed", "cursor-0.42.3-build-aaa-x86_64.AppImage"),
        ]
        names = sorted(p.name for p in store.packages_dir.iterdir())
        assert names == ["cursor-0.41.0.AppImage", "cursor-0.42.3.AppImage"]
        # 已存在的规范文件不被旧文件覆盖
        assert (store.packages_dir / "cursor-0.41.0.AppImage").read_bytes() == b"cursor-0.41.0.AppImage"

    def test_idempotent(self, store: LocalStore) -> None:
        _touch(store, "cursor-1.0.0-build-x-x86_64.AppImage", "cursor-0.9.0.AppImage")
        store.normalize()
        once = sorted(p.name for p in store.packages_dir.iterdir())
        assert store.normalize() == []
        assert sorted(p.name for p in store.packages_dir.iterdir()) == once

    def test_missing_dir(self, tmp_path: Path) -> None:
        assert LocalStore(tmp_path / "nothing").normalize() == []


class TestQueries:
    def test_list_sorted_numerically(self, store: LocalStore) -> None:
        _touch(store, "cursor-0.10.0.AppImage", "cursor-0.9.0.AppImage", "cursor-0.2.1.AppImage", "notes.txt")
        assert store.list_versions() == ["0.2.1", "0.9.0", "0.10.0"]
        assert store.latest() == "0.10.0"

    def test_empty_store(self, store: LocalStore) -> None:
        assert store.list_versions() == []
        assert store.latest() is None
        assert store.is_empty()

    def test_has(self, store: LocalStore) -> None:
        _touch(store, "cursor-1.0.0.AppImage")
        assert store.has("1.0.0")
        assert not store.has("1.0.1")


class TestDownload:
    def test_download_marks_executable(self, store: LocalStore) -> None:
        fetcher = FakeFetcher({"https://dl/1.2.0": b"binary"})
        path = store.download("1.2.0", "https://dl/1.2.0", fetcher)
        assert path == store.packages_dir / "cursor-1.2.0.AppImage"
        assert path.read_bytes() == b"binary"
        assert os.access(path, os.X_OK)
        assert store.partial_downloads() == []

    def test_empty_version_rejected(self, store: LocalStore) -> None:
        fetcher = FakeFetcher()
        with pytest.raises(InvalidArgumentError, match="版本号"):
            store.download("", "https://dl/x", fetcher)
        assert fetcher.calls == []

    def test_failed_transfer_leaves_nothing(self, store: LocalStore) -> None:
        with pytest.raises(FetchError):
            store.download("1.2.0", "https://dl/missing", FakeFetcher())
        assert list(store.packages_dir.iterdir()) == []

    def test_partial_transfer_not_published(self, store: LocalStore) -> None:
        """传输中途失败时规范路径上不出现文件，临时文件被清理"""

        class BrokenFetcher(FakeFetcher):
            def download(self, url: str, dest: Path) -> None:
                dest.write_bytes(b"half")
                raise FetchError("连接中断")

        with pytest.raises(FetchError):
            store.download("1.2.0", "https://dl/1.2.0", BrokenFetcher())
        assert not store.has("1.2.0")
        assert list(store.packages_dir.iterdir()) == []


class TestRemove:
    def test_remove(self, store: LocalStore) -> None:
        _touch(store, "cursor-1.0.0.AppImage")
        store.remove("1.0.0")
        assert not store.has("1.0.0")

    def test_remove_missing_raises(self, store: LocalStore) -> None:
        with pytest.raises(NotInstalledError, match="1.0.0"):
            store.remove("1.0.0")
