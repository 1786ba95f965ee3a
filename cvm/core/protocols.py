"""领域协议定义

核心逻辑只依赖拉取能力的抽象，不依赖具体的传输库。
使用 typing.Protocol 而非 ABC，测试里的假实现无需继承即可满足协议。
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class Fetcher(Protocol):
    """远程拉取协议

    版本目录和安装包共用同一个拉取能力。
    两个方法在传输失败时都抛出 FetchError。
    """

    def get(self, url: str) -> bytes:
        """拉取 url 的完整内容"""
        ...

    def download(self, url: str, dest: Path) -> None:
        """把 url 的内容写入 dest"""
        ...
