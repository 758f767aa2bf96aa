"""
资产数据模型

定义资产索引条目、同步结果与内部下载项。
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from assetsync.exceptions import ManifestMalformedError

HEX_DIGEST = re.compile(r"[0-9a-f]+")


class AssetStatus(Enum):
    """资产同步状态"""

    DOWNLOADED = "DOWNLOADED"
    REPLACED = "REPLACED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class Asset:
    """
    资产索引中的单个文件。

    path 为相对于目标目录的路径，hash 为小写十六进制摘要。
    """

    path: str
    hash: str
    size: int

    @classmethod
    def from_dict(cls, data: Any) -> "Asset":
        """
        将资产索引中的条目转换为 Asset 对象。
        """
        if not isinstance(data, dict):
            raise ManifestMalformedError(
                "资产条目必须是对象", context={"entry": repr(data)}
            )

        path = data.get("path")
        hash_ = data.get("hash")
        size = data.get("size")

        if not isinstance(path, str) or not path:
            raise ManifestMalformedError("资产条目缺少 path", context={"entry": data})
        if not isinstance(hash_, str) or len(hash_) < 2:
            raise ManifestMalformedError("资产条目缺少 hash", context={"entry": data})
        if not HEX_DIGEST.fullmatch(hash_.lower()):
            raise ManifestMalformedError(
                "资产条目 hash 必须是十六进制摘要", context={"entry": data}
            )
        # bool 是 int 的子类
        if not isinstance(size, int) or isinstance(size, bool) or size < 0:
            raise ManifestMalformedError("资产条目 size 无效", context={"entry": data})

        return cls(path=path, hash=hash_.lower(), size=size)

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "hash": self.hash, "size": self.size}


@dataclass
class AssetResult:
    """单个资产的同步结果"""

    path: str
    hash: str
    size: int
    status: AssetStatus
    error: Optional[str] = None

    @classmethod
    def from_asset(cls, asset: Asset, status: AssetStatus) -> "AssetResult":
        return cls(path=asset.path, hash=asset.hash, size=asset.size, status=status)

    @property
    def asset(self) -> Asset:
        return Asset(path=self.path, hash=self.hash, size=self.size)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "path": self.path,
            "hash": self.hash,
            "size": self.size,
            "status": self.status.value,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class DownloadItem:
    """下载项，仅在一次同步过程中存在"""

    source: str
    destination: str
    hash: str
    size: int
    index: int  # 对应结果列表中的位置
