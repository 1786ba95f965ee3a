"""统一异常体系

所有业务异常继承 CvmError。CLI 层据此输出错误信息和修复提示，
并以非零状态退出。所有异常对当前操作都是终止性的，不做自动重试。
"""

from __future__ import annotations


class CvmError(Exception):
    """基础异常

    hint: 可选的修复建议，通常是一条能解决问题的 cvm 命令
    """

    code: str = "UNKNOWN"

    def __init__(self, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.hint = hint


class ConfigError(CvmError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class FetchError(CvmError):
    """网络/传输失败"""

    code = "FETCH_ERROR"


class CatalogError(CvmError):
    """远程版本目录内容无法解析"""

    code = "CATALOG_ERROR"


class NotFoundError(CvmError):
    """请求的版本或平台在版本目录中不存在"""

    code = "NOT_FOUND"


class NotInstalledError(CvmError):
    """操作需要的本地安装包不存在"""

    code = "NOT_INSTALLED"


class InvalidArgumentError(CvmError):
    """缺少必填参数或参数为空"""

    code = "INVALID_ARGUMENT"


class UnsupportedPlatformError(CvmError):
    """当前主机架构没有对应的平台标识"""

    code = "UNSUPPORTED_PLATFORM"


class UnsupportedShellError(CvmError):
    """无法为当前 shell 配置 alias"""

    code = "UNSUPPORTED_SHELL"
