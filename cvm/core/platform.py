"""主机平台识别

版本目录里每个版本按平台标识（linux-x64 / linux-arm64）给出下载地址，
当前平台由处理器架构推导，每次运行只计算一次。
"""

from __future__ import annotations

import functools
import platform as _platform

from cvm.core.exceptions import UnsupportedPlatformError

_ARCH_MAP = {
    "x86_64": "linux-x64",
    "amd64": "linux-x64",
    "aarch64": "linux-arm64",
    "arm64": "linux-arm64",
}


def platform_for_machine(machine: str) -> str:
    """把 platform.machine() 的返回值映射为版本目录中的平台标识"""
    key = machine.strip().lower()
    if key not in _ARCH_MAP:
        raise UnsupportedPlatformError(
            f"不支持的处理器架构: '{machine}'，"
            f"支持: {', '.join(sorted(_ARCH_MAP))}"
        )
    return _ARCH_MAP[key]


@functools.lru_cache(maxsize=1)
def current_platform() -> str:
    return platform_for_machine(_platform.machine())
