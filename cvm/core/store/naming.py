"""安装包文件名

规范形式:   cursor-<version>.AppImage
旧版形式:   cursor-<version>-build-<build>-x86_64.AppImage
满足 parse_canonical_name(format_canonical_name(v)) == v。
"""

from __future__ import annotations

import re

from cvm.core.exceptions import InvalidArgumentError
from cvm.core.version import VERSION_PATTERN, is_version

PACKAGE_PREFIX = "cursor-"
PACKAGE_SUFFIX = ".AppImage"

_CANONICAL_RE = re.compile(rf"^cursor-({VERSION_PATTERN})\.AppImage$")
_LEGACY_RE = re.compile(rf"^cursor-({VERSION_PATTERN})-build-.*-x86_64\.AppImage$")


def format_canonical_name(version: str) -> str:
    if not is_version(version):
        raise InvalidArgumentError(f"无效的版本号: '{version}'")
    return f"{PACKAGE_PREFIX}{version}{PACKAGE_SUFFIX}"


def parse_canonical_name(filename: str) -> str | None:
    """从规范文件名中取出版本号，不匹配返回 None"""
    m = _CANONICAL_RE.match(filename)
    return m.group(1) if m else None


def parse_legacy_name(filename: str) -> str | None:
    m = _LEGACY_RE.match(filename)
    return m.group(1) if m else None
