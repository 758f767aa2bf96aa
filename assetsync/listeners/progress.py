"""
进度显示内置监听器

在同步过程中通过日志输出进度信息。
"""

from loguru import logger

from assetsync.hooks import HookContext, SyncListener


class ProgressListener(SyncListener):
    """
    下载进度监听器

    在下载过程中输出进度信息。
    """

    name = "progress"

    def __init__(self):
        self._downloaded = 0
        self._failed = 0

    def on_starting(self, context: HookContext):
        self._downloaded = 0
        self._failed = 0
        logger.info(f"📦 开始同步 {len(context.assets or ())} 个资产...")

    def on_downloading(self, context: HookContext):
        if context.item:
            logger.debug(f"⬇ 下载中: {context.item.destination}")

    def on_downloaded(self, context: HookContext):
        self._downloaded += 1
        logger.info(f"✓ 下载完成 ({context.completed}/{context.total})")

    def on_download_failed(self, context: HookContext):
        self._failed += 1
        path = context.item.destination if context.item else "unknown"
        logger.error(f"✗ 下载失败: {path}: {context.error}")

    def on_complete(self, context: HookContext):
        logger.info(f"同步结束: {self._downloaded} 个下载, {self._failed} 个失败")

    @property
    def downloaded(self) -> int:
        return self._downloaded

    @property
    def failed(self) -> int:
        return self._failed
