"""
AssetSync - 基于内容寻址 CDN 的资产同步工具
"""

from assetsync.engine import SyncEngine, SyncStats, sync_assets, sync_from_index
from assetsync.exceptions import AssetSyncError
from assetsync.hooks import HookContext, HookType, SyncListener
from assetsync.models import Asset, AssetResult, AssetStatus, SyncConfig

__version__ = "0.1.0"

__all__ = [
    "SyncEngine",
    "SyncStats",
    "sync_assets",
    "sync_from_index",
    "AssetSyncError",
    "HookContext",
    "HookType",
    "SyncListener",
    "Asset",
    "AssetResult",
    "AssetStatus",
    "SyncConfig",
]
