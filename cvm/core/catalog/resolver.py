"""版本目录解析器

职责:
- 把目录 JSON 解析为 CatalogEntry 列表
- 按平台过滤并按点分数字顺序排序
- 查询最新版本与指定版本的下载地址

目录格式:
    {"versions": [{"version": "0.40.4",
                   "platforms": {"linux-x64": "https://...", ...}}, ...]}
"""

from __future__ import annotations

import json
import logging

from cvm.core.catalog.models import CatalogEntry
from cvm.core.exceptions import CatalogError, NotFoundError
from cvm.core.version import is_version, sort_versions

logger = logging.getLogger(__name__)

_LIST_REMOTE_HINT = "使用 `cvm list-remote` 查看可下载的版本"


def parse_catalog(payload: bytes | str) -> list[CatalogEntry]:
    """解析目录内容；缺少 platforms 的版本视为没有任何平台"""
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogError(f"版本目录不是合法的 JSON: {e}") from e

    versions = data.get("versions") if isinstance(data, dict) else None
    if not isinstance(versions, list):
        raise CatalogError("版本目录缺少 versions 数组")

    entries: list[CatalogEntry] = []
    for item in versions:
        if not isinstance(item, dict):
            continue
        version = item.get("version")
        if not isinstance(version, str) or not is_version(version):
            logger.debug("跳过无法识别的目录项: %r", item)
            continue
        platforms = item.get("platforms") or {}
        if not isinstance(platforms, dict):
            platforms = {}
        entries.append(CatalogEntry(
            version=version,
            platforms={k: v for k, v in platforms.items() if isinstance(v, str) and v},
        ))
    return entries


class CatalogResolver:
    """版本目录查询"""

    def __init__(self, entries: list[CatalogEntry]) -> None:
        self.entries = entries

    @classmethod
    def from_payload(cls, payload: bytes | str) -> CatalogResolver:
        return cls(parse_catalog(payload))

    def list_available(self, platform: str) -> list[str]:
        """列出当前平台可用的所有版本（升序），没有匹配时返回空列表"""
        return sort_versions(
            e.version for e in self.entries if e.available_for(platform)
        )

    def is_available(self, version: str, platform: str) -> bool:
        return any(
            e.version == version and e.available_for(platform)
            for e in self.entries
        )

    def latest(self, platform: str) -> str:
        versions = self.list_available(platform)
        if not versions:
            raise NotFoundError(f"版本目录中没有适用于 {platform} 的版本")
        return versions[-1]

    def resolve_download_url(self, version: str, platform: str) -> str:
        """按版本字符串精确匹配，返回该平台的下载地址"""
        for e in self.entries:
            if e.version == version and e.available_for(platform):
                return e.platforms[platform]
        raise NotFoundError(
            f"版本 {version} 没有适用于 {platform} 的下载地址",
            hint=_LIST_REMOTE_HINT,
        )
