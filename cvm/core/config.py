"""集中配置管理

提供统一的配置入口，支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from cvm.core.exceptions import ConfigError
from cvm.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.config/cvm/config.yml"
CONFIG_ENV_VAR = "CVM_CONFIG"

VERSION_HISTORY_URL = (
    "https://raw.githubusercontent.com/oslook/cursor-ai-downloads/"
    "refs/heads/main/version-history.json"
)

# 需要展开 ~ 并转为绝对路径的字段
_PATH_FIELDS = ("root_dir", "cache_file")


@dataclass
class Config:
    """cvm 全局配置"""

    # 目录
    root_dir: str = "~/.local/share/cvm"
    cache_file: str = "/tmp/cursor_versions.json"  # nosec B108

    # 远程
    catalog_url: str = VERSION_HISTORY_URL
    http_timeout: int = 60

    # shell alias 名称
    alias_name: str = "cursor"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in _PATH_FIELDS:
            setattr(self, name, os.path.abspath(os.path.expanduser(getattr(self, name))))

    @property
    def root_path(self) -> Path:
        return Path(self.root_dir)

    @property
    def cache_path(self) -> Path:
        return Path(self.cache_file)

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(os.path.expanduser(str(path)))
        except (yaml.YAMLError, ValueError, OSError) as e:
            raise ConfigError(f"配置文件无效: {path} - {e}") from e
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置项无效: {path} - {e}") from e
        cfg.extra = extra
        return cfg


def default_config_path() -> str:
    return os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str | Path | None = None) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    path = path or default_config_path()
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
