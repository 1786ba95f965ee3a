"""active 软链接

<root>/active 指向当前选中的安装包，shell alias 指向这个固定路径。
链接不存在表示没有选中版本；链接目标的文件名编码了当前版本号。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from cvm.core.exceptions import NotInstalledError
from cvm.core.store.local_store import LocalStore
from cvm.core.store.naming import parse_canonical_name
from cvm.utils.atomic import atomic_symlink

logger = logging.getLogger(__name__)

POINTER_NAME = "active"


class ActivePointer:
    """当前版本指针"""

    def __init__(self, store: LocalStore) -> None:
        self.store = store
        self.path = store.root / POINTER_NAME

    def activate(self, version: str) -> Path:
        """让 active 指向指定版本，原子替换旧链接"""
        target = self.store.package_path(version)
        if not target.is_file():
            raise NotInstalledError(
                f"本地不存在版本 {version}，无法切换",
                hint="使用 `cvm list-local` 查看本地已有的版本",
            )
        atomic_symlink(target, self.path)
        logger.info("软链接已创建: %s -> %s", self.path, target)
        return target

    def current(self) -> str | None:
        """当前版本号；链接不存在、不是软链接或目标无法识别时返回 None"""
        if not self.path.is_symlink():
            return None
        target = os.readlink(self.path)
        version = parse_canonical_name(Path(target).name)
        if version is None:
            logger.warning("active 指向无法识别的文件: %s", target)
        return version

    def deactivate(self) -> bool:
        """删除 active 链接，不存在时什么都不做"""
        if self.path.is_symlink():
            self.path.unlink()
            logger.info("已删除软链接: %s", self.path)
            return True
        return False
