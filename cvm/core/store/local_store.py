"""本地安装包仓库

目录结构:
    <root>/app-images/cursor-<version>.AppImage

职责:
- 枚举本地已下载版本（点分数字升序）
- 下载安装包：先写临时文件，完整写入后加可执行权限，再原子移动到规范路径
- 删除安装包
- 启动时把旧版 build 文件名迁移为规范文件名
"""

from __future__ import annotations

import logging
import stat
from pathlib import Path

from cvm.core.exceptions import InvalidArgumentError, NotInstalledError
from cvm.core.protocols import Fetcher
from cvm.core.store.naming import (
    format_canonical_name,
    parse_canonical_name,
    parse_legacy_name,
)
from cvm.core.version import sort_versions
from cvm.utils.atomic import TMP_SUFFIX, publish, temp_path_for

logger = logging.getLogger(__name__)

PACKAGES_DIRNAME = "app-images"
_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class LocalStore:
    """版本化的本地安装包目录"""

    def __init__(self, root: Path) -> None:
        # 绝对路径，active 链接和 alias 都以此为目标
        self.root = root.absolute()
        self.packages_dir = self.root / PACKAGES_DIRNAME

    def ensure(self) -> None:
        self.packages_dir.mkdir(parents=True, exist_ok=True)

    def package_path(self, version: str) -> Path:
        return self.packages_dir / format_canonical_name(version)

    # ------------------------------------------------------------------
    # 旧文件名迁移
    # ------------------------------------------------------------------

    def normalize(self) -> list[tuple[str, str]]:
        """把旧版 build 文件名迁移为规范文件名

        规范文件已存在时删除旧文件，否则把旧文件重命名为规范文件名。
        幂等：没有新文件时再次执行不会产生任何变化。

        返回 [(动作, 文件名)]，动作为 "removed" 或 "renamed"。
        """
        if not self.packages_dir.is_dir():
            return []

        changes: list[tuple[str, str]] = []
        for path in sorted(self.packages_dir.iterdir()):
            version = parse_legacy_name(path.name)
            if version is None or not path.is_file():
                continue
            canonical = self.package_path(version)
            if canonical.exists():
                path.unlink()
                logger.info("已删除旧版文件（规范文件已存在）: %s", path.name)
                changes.append(("removed", path.name))
            else:
                path.rename(canonical)
                logger.info("已重命名旧版文件: %s -> %s", path.name, canonical.name)
                changes.append(("renamed", path.name))
        return changes

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def list_versions(self) -> list[str]:
        """列出本地所有版本（升序）"""
        if not self.packages_dir.is_dir():
            return []
        versions = []
        for path in self.packages_dir.iterdir():
            version = parse_canonical_name(path.name)
            if version is not None and path.is_file():
                versions.append(version)
        return sort_versions(versions)

    def latest(self) -> str | None:
        versions = self.list_versions()
        return versions[-1] if versions else None

    def has(self, version: str) -> bool:
        return self.package_path(version).is_file()

    def is_empty(self) -> bool:
        return not self.list_versions()

    def partial_downloads(self) -> list[Path]:
        """中断后残留的临时下载文件"""
        if not self.packages_dir.is_dir():
            return []
        return sorted(
            p for p in self.packages_dir.iterdir()
            if p.name.startswith(".") and p.name.endswith(TMP_SUFFIX)
        )

    # ------------------------------------------------------------------
    # 增删
    # ------------------------------------------------------------------

    def download(self, version: str, url: str, fetcher: Fetcher) -> Path:
        """下载指定版本到规范路径并返回该路径

        Raises:
            InvalidArgumentError: 版本号为空
            FetchError: 传输失败（临时文件已清理，规范路径不受影响）
        """
        if not version:
            raise InvalidArgumentError(
                "必须指定版本号",
                hint="使用 `cvm list-remote` 查看可下载的版本",
            )
        dest = self.package_path(version)
        self.ensure()
        tmp = temp_path_for(dest)
        try:
            fetcher.download(url, tmp)
            tmp.chmod(tmp.stat().st_mode | _EXEC_BITS)
            publish(tmp, dest)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
        logger.info("Cursor %s 已下载到 %s", version, dest)
        return dest

    def remove(self, version: str) -> None:
        path = self.package_path(version)
        if not path.is_file():
            raise NotInstalledError(
                f"本地不存在版本 {version}",
                hint="使用 `cvm list-local` 查看本地已有的版本",
            )
        path.unlink()
        logger.info("已删除: %s", path)
