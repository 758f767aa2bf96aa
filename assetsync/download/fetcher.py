"""
文件下载器

下载单个远程资源到本地路径，下载前后进行校验。
"""

import asyncio
import os
from typing import Optional

import aiofiles
import aiohttp
from loguru import logger

from assetsync.download.verifier import FileVerifier
from assetsync.exceptions import (
    AssetSyncError,
    DownloadChecksumError,
    DownloadFileError,
    DownloadNetworkError,
    ValidationIOError,
)


class FileFetcher:
    """单文件下载器"""

    def __init__(
        self,
        verifier: Optional[FileVerifier] = None,
        session: Optional[aiohttp.ClientSession] = None,
        request_timeout: Optional[float] = None,
        chunk_size: int = 8192,
    ):
        self.verifier = verifier or FileVerifier()
        self.request_timeout = request_timeout
        self.chunk_size = chunk_size
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            kwargs = {}
            if self.request_timeout:
                kwargs["timeout"] = aiohttp.ClientTimeout(total=self.request_timeout)
            self._session = aiohttp.ClientSession(**kwargs)
            self._owned_session = True
        return self._session

    async def fetch(
        self,
        source_url: str,
        destination_path: str,
        expected_hash: Optional[str] = None,
    ) -> int:
        """
        下载单个文件

        文件已存在且校验通过时直接返回，不发起网络请求。

        Returns:
            写入的字节数（跳过时为 0）
        """
        try:
            if await self.verifier.validate(destination_path, expected_hash):
                logger.debug(f"[跳过] '{destination_path}' 已存在且校验通过")
                return 0
        except AssetSyncError as e:
            raise ValidationIOError(
                f"文件校验失败: {destination_path}",
                context={"file": destination_path, "error": str(e)},
            ) from e

        parent = os.path.dirname(destination_path)
        if parent:
            try:
                os.makedirs(parent, exist_ok=True)
            except OSError as e:
                raise DownloadFileError(
                    f"创建目录失败: {parent}",
                    context={"dir": parent, "error": str(e)},
                ) from e

        logger.debug(f"[开始] 下载: {source_url}")
        written = await self._download(source_url, destination_path)

        if expected_hash:
            try:
                matched = await self.verifier.check(destination_path, expected_hash)
            except ValidationIOError as e:
                raise DownloadFileError(
                    f"下载后无法校验文件: {destination_path}",
                    context={"url": source_url, "error": str(e)},
                ) from e
            if not matched:
                self._remove(destination_path)
                raise DownloadChecksumError(
                    f"下载 {source_url} 失败! 哈希不匹配!",
                    context={"url": source_url, "expected": expected_hash},
                )

        logger.debug(f"[完成] '{destination_path}' 下载完成 ({written} 字节)")
        return written

    async def _download(self, source_url: str, destination_path: str) -> int:
        """流式写入文件"""
        written = 0
        try:
            async with self.session.get(source_url) as response:
                if response.status != 200:
                    raise DownloadNetworkError(
                        f"HTTP {response.status}: {source_url}",
                        context={"url": source_url, "status": response.status},
                    )

                async with aiofiles.open(destination_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.chunk_size):
                        await f.write(chunk)
                        written += len(chunk)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._remove(destination_path)
            raise DownloadNetworkError(
                f"网络错误: {source_url}",
                context={"url": source_url, "error": str(e)},
            ) from e
        except OSError as e:
            self._remove(destination_path)
            raise DownloadFileError(
                f"写入文件失败: {destination_path}",
                context={"file": destination_path, "error": str(e)},
            ) from e
        return written

    @staticmethod
    def _remove(file_path: str) -> None:
        """清理不完整的文件"""
        if os.path.exists(file_path):
            try:
                os.remove(file_path)
            except OSError as e:
                logger.warning(f"[警告] 无法删除文件 '{file_path}': {e}")

    async def close(self):
        """关闭下载器"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
