"""
AssetSync 服务层

包含资产索引的获取与解析。
"""

from assetsync.services.manifest import ManifestLoader, parse_manifest

__all__ = [
    "ManifestLoader",
    "parse_manifest",
]
