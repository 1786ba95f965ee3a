"""原子发布工具

缓存文件、配置文件、下载的安装包以及 active 软链接都采用同一种方式落盘:
先在目标同目录生成临时文件，写完后 os.replace 到目标路径。
同目录保证 rename 不跨文件系统，目标路径不会出现写了一半的状态。
"""

from __future__ import annotations

import logging
import os
import tempfile
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"


def temp_path_for(path: Path) -> Path:
    """返回与 path 同目录的唯一临时路径（不创建文件）"""
    return path.parent / f".{path.name}.{uuid.uuid4().hex[:8]}{TMP_SUFFIX}"


def publish(tmp: Path, dest: Path) -> None:
    """把已写完的临时文件原子替换到 dest，失败时清理临时文件"""
    try:
        os.replace(tmp, dest)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def atomic_write(path: Path, content: str | bytes) -> None:
    """原子写入文件：先写临时文件再 rename，防止中途崩溃导致损坏

    参数:
        path: 目标文件路径
        content: 要写入的内容，str 按 UTF-8 编码

    异常:
        OSError: 文件写入或移动失败，此时原文件保持不变
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = content.encode("utf-8") if isinstance(content, str) else content
    fd, tmp = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=TMP_SUFFIX,
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, str(path))
    except Exception:
        # 只捕获普通异常，不拦截 KeyboardInterrupt/SystemExit
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def atomic_symlink(target: Path, link: Path) -> None:
    """原子创建/替换软链接，等价于 ln -sf 但不会留下半成品

    先在 link 同目录创建临时软链接，再 os.replace 覆盖 link。
    任何一步失败，原有的 link 保持不变。
    """
    link.parent.mkdir(parents=True, exist_ok=True)
    tmp = temp_path_for(link)
    os.symlink(str(target), str(tmp))
    publish(tmp, link)
    logger.debug("软链接已更新: %s -> %s", link, target)
