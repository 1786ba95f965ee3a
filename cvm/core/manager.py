"""版本管理器

组合版本目录缓存、目录解析、本地仓库和 active 指针，
实现 install / update / check / use / remove / download。

状态: {本地无版本, 本地有版本} x {无 active, 有 active}，由各操作驱动转换。

用法:
    from cvm.core.manager import VersionManager

    vm = VersionManager.from_config(get_config())
    vm.prepare()
    result = vm.update()
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from cvm.core.catalog import CatalogCache, CatalogResolver
from cvm.core.config import Config
from cvm.core.exceptions import InvalidArgumentError, NotFoundError, NotInstalledError
from cvm.core.platform import current_platform
from cvm.core.protocols import Fetcher
from cvm.core.store import ActivePointer, LocalStore
from cvm.core.version import compare_versions
from cvm.utils.net import UrllibFetcher

logger = logging.getLogger(__name__)


class UpdateAction(str, Enum):
    """update 的决策结果"""
    DOWNLOAD_AND_ACTIVATE = "download_and_activate"
    ACTIVATE = "activate"
    NOOP = "noop"


class CheckStatus(str, Enum):
    """check 的状态分类，按声明顺序判定"""
    DOWNLOAD_AVAILABLE = "download_available"
    SWITCH_AVAILABLE = "switch_available"
    UP_TO_DATE = "up_to_date"


# (本地为空, active 已是最新, 最新版本已在本地) -> 动作
_UPDATE_TABLE: dict[tuple[bool, bool, bool], UpdateAction] = {
    (True, False, False): UpdateAction.DOWNLOAD_AND_ACTIVATE,
    (False, True, True): UpdateAction.NOOP,
    (False, False, True): UpdateAction.ACTIVATE,
    (False, True, False): UpdateAction.DOWNLOAD_AND_ACTIVATE,
    (False, False, False): UpdateAction.DOWNLOAD_AND_ACTIVATE,
}


def plan_update(
    store_empty: bool, active_is_latest: bool, latest_present: bool,
) -> UpdateAction:
    """update 决策表

    本地为空时其余两个条件无意义，一律下载并激活。
    active 指向最新版本但安装包已丢失时也重新下载。
    """
    if store_empty:
        return _UPDATE_TABLE[(True, False, False)]
    return _UPDATE_TABLE[(False, active_is_latest, latest_present)]


def classify(
    latest_remote: str, latest_local: str | None, active: str | None,
) -> CheckStatus:
    if latest_local is None or compare_versions(latest_remote, latest_local) > 0:
        return CheckStatus.DOWNLOAD_AVAILABLE
    if active is None or compare_versions(latest_local, active) != 0:
        return CheckStatus.SWITCH_AVAILABLE
    return CheckStatus.UP_TO_DATE


@dataclass
class UpdateResult:
    version: str
    action: UpdateAction
    path: Path | None = None


@dataclass
class DownloadResult:
    version: str
    path: Path
    skipped: bool = False


@dataclass
class CheckReport:
    latest_remote: str
    latest_local: str | None
    active: str | None
    status: CheckStatus


class VersionManager:
    """版本管理编排器

    cache / store / pointer 都以显式句柄传入，便于用临时目录隔离测试。
    """

    def __init__(
        self,
        store: LocalStore,
        cache: CatalogCache,
        catalog_url: str,
        fetcher: Fetcher,
        platform: str | None = None,
    ) -> None:
        self.store = store
        self.pointer = ActivePointer(store)
        self.cache = cache
        self.catalog_url = catalog_url
        self.fetcher = fetcher
        self._platform = platform
        self._resolver: CatalogResolver | None = None

    @property
    def platform(self) -> str:
        if self._platform is None:
            self._platform = current_platform()
        return self._platform

    @classmethod
    def from_config(
        cls, cfg: Config, fetcher: Fetcher | None = None,
        platform: str | None = None,
    ) -> VersionManager:
        fetcher = fetcher or UrllibFetcher(timeout=cfg.http_timeout)
        return cls(
            store=LocalStore(cfg.root_path),
            cache=CatalogCache(cfg.cache_path, fetcher),
            catalog_url=cfg.catalog_url,
            fetcher=fetcher,
            platform=platform,
        )

    def prepare(self) -> None:
        """每次调用只执行一次：创建目录并迁移旧文件名，须先于其他仓库操作"""
        self.store.ensure()
        changes = self.store.normalize()
        if changes:
            logger.info("已迁移 %d 个旧版文件", len(changes))

    # ------------------------------------------------------------------
    # 远程目录
    # ------------------------------------------------------------------

    def catalog(self) -> CatalogResolver:
        """本次调用内只读取/解析一次目录"""
        if self._resolver is None:
            payload = self.cache.fetch(self.catalog_url)
            self._resolver = CatalogResolver.from_payload(payload)
        return self._resolver

    def list_remote(self) -> list[str]:
        return self.catalog().list_available(self.platform)

    def latest_remote(self) -> str:
        return self.catalog().latest(self.platform)

    # ------------------------------------------------------------------
    # 本地查询
    # ------------------------------------------------------------------

    def list_local(self) -> list[str]:
        return self.store.list_versions()

    def latest_local(self) -> str | None:
        return self.store.latest()

    def active(self) -> str | None:
        return self.pointer.current()

    def require_active(self) -> str:
        version = self.active()
        if version is None:
            raise NotInstalledError(
                "当前没有选中的版本",
                hint="使用 `cvm use <version>` 选择一个版本",
            )
        return version

    def require_installed(self, version: str) -> None:
        if not version:
            raise InvalidArgumentError("必须指定版本号")
        if not self.store.has(version):
            raise NotInstalledError(
                f"本地不存在版本 {version}",
                hint="使用 `cvm list-local` 查看本地已有的版本",
            )

    # ------------------------------------------------------------------
    # 操作
    # ------------------------------------------------------------------

    def _fetch_package(self, version: str) -> Path:
        url = self.catalog().resolve_download_url(version, self.platform)
        logger.info("下载 Cursor %s: %s", version, url)
        return self.store.download(version, url, self.fetcher)

    def download(self, version: str) -> DownloadResult:
        """下载指定版本，不切换 active"""
        if not version:
            raise InvalidArgumentError(
                "必须指定版本号",
                hint="使用 `cvm list-remote` 查看可下载的版本",
            )
        if not self.catalog().is_available(version, self.platform):
            raise NotFoundError(
                f"版本 {version} 不在可下载列表中",
                hint="使用 `cvm list-remote` 查看可下载的版本",
            )
        if self.store.has(version):
            logger.info("版本 %s 已存在，跳过下载", version)
            return DownloadResult(version, self.store.package_path(version), skipped=True)
        return DownloadResult(version, self._fetch_package(version))

    def use(self, version: str) -> Path:
        self.require_installed(version)
        return self.pointer.activate(version)

    def remove(self, version: str) -> bool:
        """删除本地版本；若为当前版本先删除 active，返回是否删除了 active"""
        self.require_installed(version)
        deactivated = False
        if self.active() == version:
            deactivated = self.pointer.deactivate()
        self.store.remove(version)
        return deactivated

    def install(self) -> UpdateResult:
        """下载（如本地没有）并激活最新版本"""
        latest = self.latest_remote()
        action = UpdateAction.ACTIVATE
        if not self.store.has(latest):
            self._fetch_package(latest)
            action = UpdateAction.DOWNLOAD_AND_ACTIVATE
        path = self.pointer.activate(latest)
        return UpdateResult(latest, action, path)

    def update(self) -> UpdateResult:
        latest = self.latest_remote()
        store_empty = self.store.is_empty()
        active = None if store_empty else self.active()
        action = plan_update(
            store_empty=store_empty,
            active_is_latest=active == latest,
            latest_present=self.store.has(latest),
        )
        logger.info("update 决策: latest=%s active=%s -> %s", latest, active, action.value)

        if action is UpdateAction.NOOP:
            return UpdateResult(latest, action, self.store.package_path(latest))
        if action is UpdateAction.DOWNLOAD_AND_ACTIVATE:
            self._fetch_package(latest)
        path = self.pointer.activate(latest)
        return UpdateResult(latest, action, path)

    def check(self) -> CheckReport:
        """只读的状态检查；本地为空时 active 视为 None"""
        latest_remote = self.latest_remote()
        latest_local = self.latest_local()
        active = self.active() if latest_local is not None else None
        return CheckReport(
            latest_remote=latest_remote,
            latest_local=latest_local,
            active=active,
            status=classify(latest_remote, latest_local, active),
        )

    def uninstall(self) -> bool:
        """删除整个 cvm 根目录（安装包与 active 链接）"""
        root = self.store.root
        if not root.exists():
            return False
        shutil.rmtree(root)
        logger.info("已删除目录: %s", root)
        return True
