"""CLI: 版本查询命令（list-local, list-remote, active, check）"""

from __future__ import annotations

import click

from cvm.cli import _echo_list, _manager
from cvm.core.manager import CheckStatus


def register(group: click.Group) -> None:
    group.add_command(list_local)
    group.add_command(list_remote)
    group.add_command(active)
    group.add_command(check)


@click.command(name="list-local")
def list_local() -> None:
    """列出本地已下载的版本"""
    vm = _manager()
    versions = vm.list_local()
    if not versions:
        click.echo("本地没有已下载的版本。使用 `cvm list-remote` 查看可下载的版本。")
        return
    _echo_list("本地可用版本:", versions, marked=vm.active())


@click.command(name="list-remote")
@click.option("--refresh", is_flag=True, help="忽略缓存，重新拉取版本目录")
def list_remote(refresh: bool) -> None:
    """列出可下载的版本"""
    vm = _manager()
    if refresh:
        vm.cache.invalidate()
    _echo_list("可下载版本:", vm.list_remote())


@click.command()
def active() -> None:
    """显示当前选中的版本"""
    click.echo(_manager().require_active())


@click.command()
def check() -> None:
    """检查是否有新版本可下载或可切换"""
    report = _manager().check()
    click.echo(f"最新远程版本: {report.latest_remote}")
    click.echo(f"本地最新版本: {report.latest_local or '无'}")
    click.echo(f"当前版本: {report.active or '无'}")

    if report.status is CheckStatus.DOWNLOAD_AVAILABLE:
        click.echo("有更新的版本可供下载！")
        click.echo("使用 `cvm update` 下载并切换到最新版本")
    elif report.status is CheckStatus.SWITCH_AVAILABLE:
        click.echo("本地已有更新的版本！")
        click.echo(f"使用 `cvm use {report.latest_local}` 切换到该版本")
    else:
        click.echo("已是最新版本。")
