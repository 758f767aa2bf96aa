"""
配置模型

同步引擎的配置结构。
"""

import hashlib
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from assetsync.exceptions import ConfigError


@dataclass
class SyncConfig:
    """同步引擎配置"""

    cdn_base_url: str
    hash_algorithm: str = "sha1"
    fail_fast: bool = False
    request_timeout: Optional[float] = None
    chunk_size: int = 8192

    def __post_init__(self):
        if not isinstance(self.cdn_base_url, str) or not self.cdn_base_url:
            raise ConfigError("请配置 CDN 地址 (cdn_base_url)")

        if not isinstance(self.hash_algorithm, str):
            raise ConfigError(
                "hash_algorithm 必须是字符串",
                context={"hash_algorithm": repr(self.hash_algorithm)},
            )
        self.hash_algorithm = self.hash_algorithm.lower()
        # shake_* 需要指定摘要长度
        if (
            self.hash_algorithm not in hashlib.algorithms_available
            or self.hash_algorithm.startswith("shake_")
        ):
            raise ConfigError(
                f"不支持的哈希算法: {self.hash_algorithm}",
                context={"hash_algorithm": self.hash_algorithm},
            )

        if (
            not isinstance(self.chunk_size, int)
            or isinstance(self.chunk_size, bool)
            or self.chunk_size <= 0
        ):
            raise ConfigError("chunk_size 必须为正整数")

        if self.request_timeout is not None and (
            not isinstance(self.request_timeout, (int, float))
            or isinstance(self.request_timeout, bool)
            or self.request_timeout <= 0
        ):
            raise ConfigError("request_timeout 必须为正数")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SyncConfig":
        """从配置字典创建，忽略未知字段"""
        if not isinstance(data, dict):
            raise ConfigError(
                "配置内容必须是键值对象", context={"type": type(data).__name__}
            )
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        if "cdn_base_url" not in kwargs:
            raise ConfigError("请配置 CDN 地址 (cdn_base_url)")
        return cls(**kwargs)

    def source_url(self, asset_hash: str) -> str:
        """按 CDN 分片规则计算资产地址: {base}/{hash[0:2]}/{hash}"""
        return f"{self.cdn_base_url.rstrip('/')}/{asset_hash[:2]}/{asset_hash}"
