"""网络工具: URL 安全校验 + 基于 urllib 的拉取实现"""

from __future__ import annotations

import http.client
import logging
import os
import urllib.error
import urllib.request
from pathlib import Path
from urllib.parse import urlparse

from cvm.core.exceptions import FetchError, InvalidArgumentError

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = frozenset(("http", "https"))
_CHUNK_SIZE = 64 * 1024
# 连接提前关闭等传输错误不一定是 OSError
_TRANSPORT_ERRORS = (urllib.error.URLError, http.client.HTTPException, OSError)
USER_AGENT = "cvm"


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        InvalidArgumentError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise InvalidArgumentError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


class UrllibFetcher:
    """默认的拉取实现，HTTP GET 走 urllib.request"""

    def __init__(self, timeout: float = 60) -> None:
        self.timeout = timeout

    def _open(self, url: str):  # noqa: ANN202
        validate_url_scheme(url, context="fetch")
        req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        return urllib.request.urlopen(req, timeout=self.timeout)  # nosec B310

    def get(self, url: str) -> bytes:
        logger.info("GET %s", url)
        try:
            with self._open(url) as resp:
                return resp.read()
        except _TRANSPORT_ERRORS as e:
            raise FetchError(f"请求失败: {url} - {e}") from e

    def download(self, url: str, dest: Path) -> None:
        """流式下载到 dest；失败时删除 dest 上已写入的部分"""
        logger.info("下载: %s -> %s", url, dest)
        downloaded = 0
        try:
            with self._open(url) as resp, open(dest, "wb") as f:
                while True:
                    chunk = resp.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    f.write(chunk)
                    downloaded += len(chunk)
                expected = resp.headers.get("Content-Length")
                if expected is not None and int(expected) != downloaded:
                    raise FetchError(
                        f"下载不完整: {url} - 已接收 {downloaded} 字节，应为 {expected} 字节"
                    )
        except FetchError:
            _discard(dest)
            raise
        except (_TRANSPORT_ERRORS + (ValueError,)) as e:
            _discard(dest)
            raise FetchError(f"下载失败: {url} - {e}") from e
        logger.info("已保存: %s (%d 字节)", dest, downloaded)


def _discard(path: Path) -> None:
    if os.path.exists(path):
        os.unlink(path)
