"""版本目录本地缓存

缓存策略:
  - 单个缓存文件，以文件 mtime 作为拉取时间
  - 文件年龄严格小于有效期（15 分钟）时原样返回
  - 否则重新拉取，写临时文件后原子替换；失败时旧缓存保持不变
  - 刷新失败不回退到过期缓存，直接抛出 FetchError
  - 无锁，多个进程同时刷新时以最后写入者为准
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from cvm.core.protocols import Fetcher
from cvm.utils.atomic import atomic_write

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 15 * 60


class CatalogCache:
    """版本目录缓存"""

    def __init__(
        self,
        cache_file: Path,
        fetcher: Fetcher,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache_file = cache_file
        self.fetcher = fetcher
        self.ttl = ttl
        self.clock = clock

    def age(self) -> float | None:
        """缓存文件年龄（秒），不存在返回 None"""
        try:
            mtime = self.cache_file.stat().st_mtime
        except FileNotFoundError:
            return None
        return self.clock() - mtime

    def is_fresh(self) -> bool:
        age = self.age()
        return age is not None and age < self.ttl

    def fetch(self, remote_url: str) -> bytes:
        """返回版本目录原始内容，必要时从远程刷新"""
        if self.is_fresh():
            logger.debug("缓存命中: %s", self.cache_file)
            return self.cache_file.read_bytes()

        logger.info("缓存过期或不存在，刷新版本目录: %s", remote_url)
        payload = self.fetcher.get(remote_url)
        atomic_write(self.cache_file, payload)
        return payload

    def invalidate(self) -> bool:
        """删除缓存文件"""
        if self.cache_file.exists():
            self.cache_file.unlink()
            return True
        return False
