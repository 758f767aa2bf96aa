"""
AssetSync 下载层

包含单文件下载与文件校验功能。
"""

from assetsync.download.fetcher import FileFetcher
from assetsync.download.verifier import FileVerifier

__all__ = [
    "FileFetcher",
    "FileVerifier",
]
