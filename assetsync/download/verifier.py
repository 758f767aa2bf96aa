"""
文件校验器

实现哈希校验、文件存在性检查、文件完整性验证。
"""

import hashlib
import os
from typing import Optional

import aiofiles

from assetsync.exceptions import ValidationIOError


class FileVerifier:
    """文件校验器"""

    def __init__(self, algorithm: str = "sha1", chunk_size: int = 8192):
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    async def calc_hash(self, file_path: str) -> str:
        """
        计算文件的摘要值

        Args:
            file_path: 文件路径

        Returns:
            十六进制摘要

        Raises:
            ValidationIOError: 文件不存在或读取失败
        """
        if not os.path.exists(file_path):
            raise ValidationIOError(
                f"文件不存在: {file_path}", context={"file": file_path}
            )

        digest = hashlib.new(self.algorithm)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                while True:
                    data = await f.read(self.chunk_size)
                    if not data:
                        break
                    digest.update(data)
        except OSError as e:
            raise ValidationIOError(
                f"读取文件失败: {file_path}",
                context={"file": file_path, "error": str(e)},
            ) from e
        return digest.hexdigest()

    async def check(self, file_path: str, expected_hash: str) -> bool:
        """
        校验文件摘要是否匹配（不区分大小写）

        Args:
            file_path: 文件路径
            expected_hash: 预期的摘要值

        Returns:
            是否匹配
        """
        current_hash = await self.calc_hash(file_path)
        return current_hash.lower() == expected_hash.lower()

    @staticmethod
    def exists(file_path: str) -> bool:
        """检查文件是否存在"""
        return os.path.exists(file_path)

    async def validate(self, file_path: str, expected_hash: Optional[str] = None) -> bool:
        """
        检查文件是否有效

        文件不存在返回 False；存在且未提供摘要返回 True；
        否则返回摘要校验结果。

        Args:
            file_path: 文件路径
            expected_hash: 预期的摘要值

        Returns:
            是否有效
        """
        if not self.exists(file_path):
            return False

        if expected_hash:
            return await self.check(file_path, expected_hash)

        return True
