"""版本目录数据模型"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CatalogEntry:
    """版本目录中的一个版本"""

    version: str
    platforms: dict[str, str] = field(default_factory=dict)  # 平台 -> 下载地址

    def available_for(self, platform: str) -> bool:
        return platform in self.platforms
