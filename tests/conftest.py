"""公共测试夹具：内存版拉取实现 + 版本目录构造"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import cvm.core.config as cfgmod
from cvm.core.catalog import CatalogCache
from cvm.core.exceptions import FetchError
from cvm.core.manager import VersionManager
from cvm.core.store import LocalStore

CATALOG_URL = "https://example.com/version-history.json"


def make_catalog(versions: dict[str, dict[str, str]]) -> bytes:
    """{version: {platform: url}} -> 目录 JSON"""
    return json.dumps({
        "versions": [
            {"version": v, "platforms": platforms}
            for v, platforms in versions.items()
        ],
    }).encode()


def x64_catalog(*versions: str) -> bytes:
    return make_catalog({
        v: {"linux-x64": f"https://dl.example.com/cursor-{v}-x86_64.AppImage"}
        for v in versions
    })


class FakeFetcher:
    """按 URL 返回预置内容；未预置的 URL 抛出 FetchError"""

    def __init__(self, responses: dict[str, bytes] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[str] = []

    def get(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.responses:
            raise FetchError(f"请求失败: {url}")
        return self.responses[url]

    def download(self, url: str, dest: Path) -> None:
        dest.write_bytes(self.get(url))

    @property
    def downloads(self) -> list[str]:
        return [u for u in self.calls if u != CATALOG_URL]


@pytest.fixture()
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture()
def store(tmp_path: Path) -> LocalStore:
    s = LocalStore(tmp_path / "cvm")
    s.ensure()
    return s


@pytest.fixture()
def make_manager(tmp_path: Path, fetcher: FakeFetcher):
    """按给定版本构造目录并返回已 prepare 的 VersionManager"""

    def _make(*versions: str, payload: bytes | None = None) -> VersionManager:
        body = payload if payload is not None else x64_catalog(*versions)
        fetcher.responses[CATALOG_URL] = body
        for v in versions:
            fetcher.responses[f"https://dl.example.com/cursor-{v}-x86_64.AppImage"] = f"appimage {v}".encode()
        vm = VersionManager(
            store=LocalStore(tmp_path / "cvm"),
            cache=CatalogCache(tmp_path / "cursor_versions.json", fetcher),
            catalog_url=CATALOG_URL,
            fetcher=fetcher,
            platform="linux-x64",
        )
        vm.prepare()
        return vm

    return _make


@pytest.fixture(autouse=True)
def _reset_config(monkeypatch: pytest.MonkeyPatch):
    """每个测试使用独立的全局配置"""
    monkeypatch.setattr(cfgmod, "_current", None)
    yield
