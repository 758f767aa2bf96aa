"""
AssetSync 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和字典序列化。
"""

from typing import Any, Dict, Optional


class AssetSyncError(Exception):
    """AssetSync 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigError(AssetSyncError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class ManifestError(AssetSyncError):
    """资产索引相关错误"""

    def _get_default_code(self) -> str:
        return "E200"


class ManifestUnavailableError(ManifestError):
    """资产索引不可用（本地不存在或远程获取失败）"""

    def _get_default_code(self) -> str:
        return "E201"


class ManifestMalformedError(ManifestError):
    """资产索引内容无法解析"""

    def _get_default_code(self) -> str:
        return "E202"


class ValidationIOError(AssetSyncError):
    """校验文件时发生的 I/O 错误（与“文件不匹配”不同）"""

    def _get_default_code(self) -> str:
        return "E300"


class DownloadError(AssetSyncError):
    """下载相关错误"""

    def _get_default_code(self) -> str:
        return "E400"


class DownloadNetworkError(DownloadError):
    """下载网络错误"""

    def _get_default_code(self) -> str:
        return "E401"


class DownloadChecksumError(DownloadError):
    """下载校验错误"""

    def _get_default_code(self) -> str:
        return "E402"


class DownloadFileError(DownloadError):
    """下载文件操作错误"""

    def _get_default_code(self) -> str:
        return "E403"


__all__ = [
    "AssetSyncError",
    "ConfigError",
    "ManifestError",
    "ManifestUnavailableError",
    "ManifestMalformedError",
    "ValidationIOError",
    "DownloadError",
    "DownloadNetworkError",
    "DownloadChecksumError",
    "DownloadFileError",
]
