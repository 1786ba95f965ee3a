"""远程版本目录

- models.py: 数据模型
- cache.py: 本地缓存（15 分钟有效期）
- resolver.py: 目录解析与查询
"""

from cvm.core.catalog.cache import CatalogCache
from cvm.core.catalog.models import CatalogEntry
from cvm.core.catalog.resolver import CatalogResolver

__all__ = [
    "CatalogEntry",
    "CatalogCache",
    "CatalogResolver",
]
