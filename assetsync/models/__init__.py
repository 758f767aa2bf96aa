"""
AssetSync 数据模型包

包含资产模型、同步结果与配置模型定义。
"""

from assetsync.models.asset import (
    Asset,
    AssetStatus,
    AssetResult,
    DownloadItem,
)
from assetsync.models.config import SyncConfig

__all__ = [
    # 资产模型
    "Asset",
    "AssetStatus",
    "AssetResult",
    "DownloadItem",
    # 配置模型
    "SyncConfig",
]
