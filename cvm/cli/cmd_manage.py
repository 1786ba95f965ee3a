"""CLI: 版本管理命令（download, update, use, remove, install, uninstall）"""

from __future__ import annotations

import click

from cvm.cli import _manager
from cvm.core import shell
from cvm.core.config import get_config
from cvm.core.manager import UpdateAction, VersionManager


def register(group: click.Group) -> None:
    group.add_command(download)
    group.add_command(update)
    group.add_command(use)
    group.add_command(remove)
    group.add_command(install)
    group.add_command(uninstall)


@click.command()
@click.argument("version")
def download(version: str) -> None:
    """下载指定版本（不切换）"""
    result = _manager().download(version)
    if result.skipped:
        click.echo(f"版本 {version} 已下载。")
    else:
        click.echo(f"Cursor {version} 已下载到 {result.path}")
    click.echo(f"使用 `cvm use {version}` 切换到该版本")


@click.command()
def update() -> None:
    """下载并切换到最新版本"""
    result = _manager().update()
    if result.action is UpdateAction.NOOP:
        click.echo(f"已是最新版本: {result.version}")
    elif result.action is UpdateAction.ACTIVATE:
        click.echo(f"本地已有 {result.version}，已切换到该版本: {result.path}")
    else:
        click.echo(f"Cursor {result.version} 已下载并切换: {result.path}")


@click.command()
@click.argument("version")
def use(version: str) -> None:
    """切换到本地已有的版本"""
    vm = _manager()
    target = vm.use(version)
    click.echo(f"软链接已创建: {vm.pointer.path} -> {target}")


@click.command()
@click.argument("version")
def remove(version: str) -> None:
    """删除本地已有的版本"""
    deactivated = _manager().remove(version)
    if deactivated:
        click.echo(f"版本 {version} 是当前版本，已取消选中。")
    click.echo(f"版本 {version} 已删除。")


@click.command()
def install() -> None:
    """添加 cursor alias 并下载最新版本"""
    cfg = get_config()
    profile = shell.detect_shell()
    vm = _manager()
    result = vm.install()
    click.echo(f"Cursor {result.version} 已安装并切换。")

    line = shell.alias_line(cfg.alias_name, vm.pointer.path)
    shell.add_alias(profile, line)
    click.echo(f"alias 已添加到 {profile.rc_file}，现在可以用 '{cfg.alias_name}' 启动 Cursor。")
    click.echo(profile.reload_hint)


@click.command()
@click.option("--yes", "-y", is_flag=True, help="不询问，直接卸载")
def uninstall(yes: bool) -> None:
    """删除 cvm 目录（含全部已下载版本）及 alias"""
    cfg = get_config()
    if not yes:
        click.confirm(f"将删除 {cfg.root_dir} 及其中所有版本，确定继续?", abort=True)
    profile = shell.detect_shell()
    vm = VersionManager.from_config(cfg)
    vm.uninstall()

    line = shell.alias_line(cfg.alias_name, vm.pointer.path)
    if shell.remove_alias(profile, line):
        click.echo(f"alias 已从 {profile.rc_file} 删除")
        click.echo(profile.reload_hint)
    click.echo("Cursor 版本管理器已卸载。")
