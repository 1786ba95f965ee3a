"""shell alias 配置

install 时在 shell 配置文件中追加 alias cursor='<root>/active'，
uninstall 时删除同一行。配置文件按 $SHELL 选择:

  sh / dash -> ~/.profile   (生效: . ~/.profile)
  bash      -> ~/.bashrc    (生效: source ~/.bashrc)
  zsh       -> ~/.zshrc     (生效: source ~/.zshrc)
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from cvm.core.exceptions import UnsupportedShellError
from cvm.utils.atomic import atomic_write

logger = logging.getLogger(__name__)

_RC_FILES = {
    "sh": (".profile", "."),
    "dash": (".profile", "."),
    "bash": (".bashrc", "source"),
    "zsh": (".zshrc", "source"),
}


@dataclass
class ShellProfile:
    shell: str
    rc_file: Path
    source_cmd: str

    @property
    def reload_hint(self) -> str:
        return f"执行 '{self.source_cmd} ~/{self.rc_file.name}' 或重启 shell 使配置生效"


def detect_shell(shell_path: str | None = None, home: Path | None = None) -> ShellProfile:
    shell_path = shell_path if shell_path is not None else os.environ.get("SHELL", "")
    shell = os.path.basename(shell_path)
    if shell not in _RC_FILES:
        raise UnsupportedShellError(
            f"不支持的 shell: '{shell or '未知'}'，请使用 bash、zsh 或 sh",
            hint="如需支持其他 shell，请到 https://github.com/ivstiv/cursor-version-manager/issues 提 issue",
        )
    rc_name, source_cmd = _RC_FILES[shell]
    home = home or Path.home()
    return ShellProfile(shell=shell, rc_file=home / rc_name, source_cmd=source_cmd)


def alias_line(alias_name: str, pointer_path: Path) -> str:
    return f"alias {alias_name}='{pointer_path}'"


def add_alias(profile: ShellProfile, line: str) -> bool:
    """追加 alias 行，已存在时不重复添加；返回是否有修改"""
    content = profile.rc_file.read_text(encoding="utf-8") if profile.rc_file.exists() else ""
    if line in content.splitlines():
        logger.info("alias 已存在: %s", profile.rc_file)
        return False
    prefix = "\n" if content and not content.endswith("\n") else ""
    with open(profile.rc_file, "a", encoding="utf-8") as f:
        f.write(f"{prefix}{line}\n")
    logger.info("alias 已写入: %s", profile.rc_file)
    return True


def remove_alias(profile: ShellProfile, line: str) -> bool:
    """删除与 line 完全相同的行；返回是否有修改"""
    if not profile.rc_file.exists():
        return False
    lines = profile.rc_file.read_text(encoding="utf-8").splitlines(keepends=True)
    kept = [ln for ln in lines if ln.rstrip("\n") != line]
    if len(kept) == len(lines):
        return False
    mode = stat.S_IMODE(profile.rc_file.stat().st_mode)
    atomic_write(profile.rc_file, "".join(kept))
    profile.rc_file.chmod(mode)
    logger.info("alias 已从 %s 删除", profile.rc_file)
    return True
