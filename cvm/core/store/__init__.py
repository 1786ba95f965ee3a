"""本地安装包仓库

- naming.py: 规范文件名 / 旧版文件名的解析与格式化
- local_store.py: 安装包的枚举、下载、删除与旧文件名迁移
- pointer.py: active 软链接
"""

from cvm.core.store.local_store import LocalStore
from cvm.core.store.pointer import ActivePointer

__all__ = [
    "LocalStore",
    "ActivePointer",
]
