"""点分数字版本号

版本号形如 0.40.4，逐段按整数比较，较短的一方末尾补 0。
不能用字符串排序：字符串排序会把 0.9.0 排在 0.10.0 之后。
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from cvm.core.exceptions import InvalidArgumentError

VERSION_PATTERN = r"[0-9]+(?:\.[0-9]+)*"
_VERSION_RE = re.compile(rf"^{VERSION_PATTERN}$")


def is_version(text: str) -> bool:
    return bool(_VERSION_RE.match(text))


def version_key(version: str) -> tuple[int, ...]:
    """把版本号转为可比较的整数元组，末尾的 0 被去掉以实现补零语义"""
    if not is_version(version):
        raise InvalidArgumentError(f"无效的版本号: '{version}'")
    parts = [int(p) for p in version.split(".")]
    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def compare_versions(a: str, b: str) -> int:
    """a < b 返回 -1，相等返回 0，a > b 返回 1"""
    ka, kb = version_key(a), version_key(b)
    return (ka > kb) - (ka < kb)


def sort_versions(versions: Iterable[str]) -> list[str]:
    """升序排序；补零后相等的版本保持原有相对顺序"""
    return sorted(versions, key=version_key)
