"""cvm 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
业务异常在 group 层统一转换为错误提示和非零退出码。
"""

from __future__ import annotations

import os
from typing import Any

import click

from cvm import __version__
from cvm.core.config import get_config, init_config
from cvm.core.exceptions import CvmError
from cvm.core.manager import VersionManager
from cvm.core.store import LocalStore
from cvm.utils.logger import setup_logging

EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def _manager() -> VersionManager:
    """当前调用的版本管理器；首次获取时完成目录准备和旧文件名迁移"""
    ctx = click.get_current_context()
    obj: dict[str, Any] = ctx.ensure_object(dict)
    if "manager" not in obj:
        vm = VersionManager.from_config(get_config())
        vm.prepare()
        obj["manager"] = vm
    return obj["manager"]


def _echo_list(title: str, items: list[str], marked: str | None = None) -> None:
    click.echo(title)
    for item in items:
        marker = " <- 当前" if item == marked else ""
        click.echo(f"  - {item}{marker}")


class CvmGroup(click.Group):
    """统一处理业务异常与 Ctrl-C"""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except CvmError as e:
            click.echo(f"错误: {e}", err=True)
            if e.hint:
                click.echo(e.hint, err=True)
            ctx.exit(EXIT_ERROR)
        except KeyboardInterrupt:
            store = LocalStore(get_config().root_path)
            click.echo("\n操作已中断。", err=True)
            click.echo(
                f"请检查 {store.packages_dir} 中是否有未完成的下载（以 .tmp 结尾的文件）并手动删除。",
                err=True,
            )
            for partial in store.partial_downloads():
                click.echo(f"  - {partial.name}", err=True)
            ctx.exit(EXIT_INTERRUPTED)


@click.group(cls=CvmGroup)
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="配置文件路径（默认 $CVM_CONFIG 或 ~/.config/cvm/config.yml）")
@click.option("--verbose", "-V", is_flag=True, help="输出调试日志")
def main(config_path: str | None, verbose: bool) -> None:
    """cvm - Cursor 版本管理器

    AppImage 从官方发布地址下载，下载源列表见
    https://github.com/oslook/cursor-ai-downloads
    """
    setup_logging(
        level="DEBUG" if verbose else os.getenv("CVM_LOG_LEVEL", "WARNING"),
        json_output=os.getenv("CVM_LOG_JSON", "") == "1",
    )
    init_config(config_path)


# 注册各领域子命令
from cvm.cli.cmd_versions import register as _reg_versions  # noqa: E402
from cvm.cli.cmd_manage import register as _reg_manage  # noqa: E402

_reg_versions(main)
_reg_manage(main)
