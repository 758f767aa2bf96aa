"""
同步引擎

加载资产索引、计算差异、顺序下载需要的文件并汇报每个资产的结果。
"""

import os
from dataclasses import dataclass
from typing import List, Optional, Sequence

import aiohttp
from loguru import logger

from assetsync.download import FileFetcher, FileVerifier
from assetsync.exceptions import AssetSyncError, ManifestMalformedError
from assetsync.hooks import HookContext, HookManager, HookType, SyncListener
from assetsync.models import (
    Asset,
    AssetResult,
    AssetStatus,
    DownloadItem,
    SyncConfig,
)
from assetsync.services import ManifestLoader


@dataclass
class SyncStats:
    """同步统计"""

    total: int = 0
    needed: int = 0
    downloaded: int = 0
    replaced: int = 0
    skipped: int = 0
    failed: int = 0
    bytes_downloaded: int = 0


def resolve_destination(destination: str, relative_path: str) -> str:
    """
    计算资产的本地路径

    路径必须位于目标目录之内。
    """
    if os.path.isabs(relative_path):
        raise ManifestMalformedError(
            f"资产路径必须是相对路径: {relative_path}",
            context={"path": relative_path},
        )
    root = os.path.abspath(destination)
    full_path = os.path.normpath(os.path.join(root, relative_path))
    if os.path.commonpath([root, full_path]) != root or full_path == root:
        raise ManifestMalformedError(
            f"资产路径超出目标目录: {relative_path}",
            context={"path": relative_path},
        )
    return full_path


class SyncEngine:
    """资产同步引擎"""

    def __init__(
        self,
        config: SyncConfig,
        listeners: Optional[Sequence[SyncListener]] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.config = config
        self.hooks = HookManager(listeners)
        self.verifier = FileVerifier(config.hash_algorithm, config.chunk_size)
        self.fetcher = FileFetcher(
            verifier=self.verifier,
            session=session,
            request_timeout=config.request_timeout,
            chunk_size=config.chunk_size,
        )
        self.loader = ManifestLoader(session=session)
        self.stats = SyncStats()

    async def sync_from_index(
        self, index_path: str, destination: str
    ) -> List[AssetResult]:
        """从本地或远程资产索引同步到目标目录"""
        assets = await self.loader.load(index_path)
        return await self.sync(assets, destination)

    async def sync(
        self, assets: Sequence[Asset], destination: str
    ) -> List[AssetResult]:
        """
        将资产列表同步到目标目录

        先完整计算差异，再按顺序下载，结果顺序与输入一致。

        Args:
            assets: 资产列表
            destination: 目标目录

        Returns:
            每个资产的同步结果
        """
        self.stats = SyncStats(total=len(assets))
        await self.hooks.execute_hook(HookType.STARTING, HookContext(assets=assets))

        os.makedirs(destination, exist_ok=True)

        results, queue = await self._diff(assets, destination)

        self.stats.needed = len(queue)
        logger.info(f"{len(queue)}/{len(assets)} 个文件需要下载")

        await self._execute(queue, results)

        logger.success(
            f"同步完成: {self.stats.downloaded} 下载, {self.stats.replaced} 替换, "
            f"{self.stats.skipped} 跳过, {self.stats.failed} 失败"
        )
        await self.hooks.execute_hook(
            HookType.COMPLETE, HookContext(results=results, total=len(queue))
        )
        return results

    async def _diff(self, assets: Sequence[Asset], destination: str):
        """第一遍：计算每个资产的状态和下载队列"""
        results: List[AssetResult] = []
        queue: List[DownloadItem] = []

        for index, asset in enumerate(assets):
            full_path = resolve_destination(destination, asset.path)
            source = self.config.source_url(asset.hash)

            if not self.verifier.exists(full_path):
                status = AssetStatus.DOWNLOADED
            else:
                try:
                    valid = await self.verifier.validate(full_path, asset.hash)
                except AssetSyncError as e:
                    if self.config.fail_fast:
                        raise
                    logger.error(f"[错误] 校验 '{asset.path}' 失败: {e}")
                    result = AssetResult.from_asset(asset, AssetStatus.FAILED)
                    result.error = str(e)
                    results.append(result)
                    self.stats.failed += 1
                    continue

                if valid:
                    logger.debug(f"[跳过] '{asset.path}' 已存在且校验通过")
                    results.append(AssetResult.from_asset(asset, AssetStatus.SKIPPED))
                    self.stats.skipped += 1
                    continue

                logger.warning(f"[警告] '{asset.path}' 校验不匹配，将重新下载")
                status = AssetStatus.REPLACED

            results.append(AssetResult.from_asset(asset, status))
            queue.append(
                DownloadItem(
                    source=source,
                    destination=full_path,
                    hash=asset.hash,
                    size=asset.size,
                    index=index,
                )
            )

        return results, queue

    async def _execute(
        self, queue: List[DownloadItem], results: List[AssetResult]
    ) -> None:
        """第二遍：顺序下载"""
        total = len(queue)

        for completed, item in enumerate(queue, start=1):
            await self.hooks.execute_hook(
                HookType.DOWNLOADING,
                HookContext(item=item, completed=completed - 1, total=total),
            )

            result = results[item.index]
            try:
                written = await self.fetcher.fetch(
                    item.source, item.destination, item.hash
                )
            except AssetSyncError as e:
                if self.config.fail_fast:
                    logger.error(f"[错误] 下载 '{item.source}' 失败，终止同步: {e}")
                    raise
                logger.error(f"[错误] 下载 '{item.source}' 失败: {e}")
                result.status = AssetStatus.FAILED
                result.error = str(e)
                self.stats.failed += 1
                await self.hooks.execute_hook(
                    HookType.DOWNLOAD_FAILED,
                    HookContext(item=item, completed=completed, total=total, error=e),
                )
            else:
                self.stats.bytes_downloaded += written
                if result.status == AssetStatus.REPLACED:
                    self.stats.replaced += 1
                else:
                    self.stats.downloaded += 1
                await self.hooks.execute_hook(
                    HookType.DOWNLOADED,
                    HookContext(item=item, completed=completed, total=total),
                )

            progress = (completed / total) * 100
            logger.info(f"下载进度: {progress:.2f}%")
            await self.hooks.execute_hook(
                HookType.PROGRESS,
                HookContext(progress=progress, completed=completed, total=total),
            )

    def get_stats(self) -> SyncStats:
        """获取上一次同步的统计"""
        return self.stats

    async def close(self):
        """关闭引擎"""
        await self.fetcher.close()
        await self.loader.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()


async def sync_assets(
    assets: Sequence[Asset],
    destination: str,
    cdn_base_url: str,
    hash_algorithm: str = "sha1",
    fail_fast: bool = False,
    listeners: Optional[Sequence[SyncListener]] = None,
) -> List[AssetResult]:
    """一次性同步资产列表"""
    config = SyncConfig(
        cdn_base_url=cdn_base_url, hash_algorithm=hash_algorithm, fail_fast=fail_fast
    )
    async with SyncEngine(config, listeners) as engine:
        return await engine.sync(assets, destination)


async def sync_from_index(
    index_path: str,
    destination: str,
    cdn_base_url: str,
    hash_algorithm: str = "sha1",
    fail_fast: bool = False,
    listeners: Optional[Sequence[SyncListener]] = None,
) -> List[AssetResult]:
    """一次性从资产索引同步"""
    config = SyncConfig(
        cdn_base_url=cdn_base_url, hash_algorithm=hash_algorithm, fail_fast=fail_fast
    )
    async with SyncEngine(config, listeners) as engine:
        return await engine.sync_from_index(index_path, destination)
