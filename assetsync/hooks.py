"""
同步事件 Hook

定义同步生命周期事件、监听器接口和 Hook 调度。
监听器只用于观察，不影响同步结果。
"""

import asyncio
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from assetsync.models import Asset, AssetResult, DownloadItem


class HookType(Enum):
    """Hook 类型定义"""

    STARTING = auto()  # 差异计算前，携带完整资产列表
    DOWNLOADING = auto()  # 单个文件下载前
    DOWNLOADED = auto()  # 单个文件下载完成后
    DOWNLOAD_FAILED = auto()  # 单个文件下载失败时
    PROGRESS = auto()  # 总进度更新
    COMPLETE = auto()  # 同步结束，携带完整结果列表


@dataclass
class HookContext:
    """Hook 上下文信息"""

    assets: Optional[Sequence[Asset]] = None
    item: Optional[DownloadItem] = None
    results: Optional[Sequence[AssetResult]] = None
    progress: Optional[float] = None
    completed: int = 0
    total: int = 0
    error: Optional[Exception] = None


class SyncListener:
    """
    同步监听器基类

    子类覆盖需要的 on_* 方法即可，也可以直接覆盖 register_hooks。
    """

    name: str = ""

    def register_hooks(self) -> Dict[HookType, Callable]:
        """
        注册 Hook 处理器

        Returns:
            Dict[HookType, Callable]: Hook 类型到处理函数的映射
        """
        return {
            HookType.STARTING: self.on_starting,
            HookType.DOWNLOADING: self.on_downloading,
            HookType.DOWNLOADED: self.on_downloaded,
            HookType.DOWNLOAD_FAILED: self.on_download_failed,
            HookType.PROGRESS: self.on_progress,
            HookType.COMPLETE: self.on_complete,
        }

    def on_starting(self, context: HookContext) -> None:
        pass

    def on_downloading(self, context: HookContext) -> None:
        pass

    def on_downloaded(self, context: HookContext) -> None:
        pass

    def on_download_failed(self, context: HookContext) -> None:
        pass

    def on_progress(self, context: HookContext) -> None:
        pass

    def on_complete(self, context: HookContext) -> None:
        pass


class HookManager:
    """
    Hook 管理器

    负责监听器的注册和 Hook 调用。
    """

    def __init__(self, listeners: Optional[Sequence[SyncListener]] = None):
        self._listeners: List[Tuple[SyncListener, Dict[HookType, Callable]]] = []
        self._hooks: Dict[HookType, List[Callable]] = {hook: [] for hook in HookType}
        for listener in listeners or ():
            self.register(listener)

    def register(self, listener: SyncListener) -> None:
        """注册监听器"""
        hooks = listener.register_hooks()
        self._listeners.append((listener, hooks))
        for hook_type, handler in hooks.items():
            self._hooks[hook_type].append(handler)
        logger.debug(f"监听器 {listener.name or type(listener).__name__} 注册成功")

    def on(self, hook_type: HookType, handler: Callable) -> None:
        """直接注册单个处理函数"""
        self._hooks[hook_type].append(handler)

    def unregister(self, listener: SyncListener) -> bool:
        """注销监听器"""
        for position, (registered, hooks) in enumerate(self._listeners):
            if registered is listener:
                break
        else:
            return False
        for hook_type, handler in hooks.items():
            if handler in self._hooks[hook_type]:
                self._hooks[hook_type].remove(handler)
        del self._listeners[position]
        return True

    @property
    def listeners(self) -> List[SyncListener]:
        return [listener for listener, _ in self._listeners]

    async def execute_hook(self, hook_type: HookType, context: HookContext) -> None:
        """
        执行指定类型的所有 Hook

        处理函数抛出的异常只记录日志，不会中断同步。
        """
        for handler in self._hooks.get(hook_type, []):
            try:
                if asyncio.iscoroutinefunction(handler):
                    await handler(context)
                else:
                    handler(context)
            except Exception as e:
                logger.error(f"Hook {hook_type.name} 执行失败: {e}")
