"""
资产索引加载器

从本地文件或远程地址获取资产索引并解析为 Asset 列表。
"""

import asyncio
import json
import os
from typing import Any, List, Optional

import aiofiles
import aiohttp
from loguru import logger

from assetsync.exceptions import ManifestMalformedError, ManifestUnavailableError
from assetsync.models import Asset


def is_remote(index_path: str) -> bool:
    """是否为远程地址"""
    return index_path.lower().startswith(("http://", "https://"))


def parse_manifest(text: str) -> List[Asset]:
    """
    解析资产索引文本

    接受资产对象列表，或包含 assets 列表的对象。
    """
    try:
        document = json.loads(text)
    except ValueError as e:
        raise ManifestMalformedError(
            "资产索引解析失败", context={"error": str(e)}
        ) from e

    return parse_entries(document)


def parse_entries(document: Any) -> List[Asset]:
    """将已解码的索引结构转换为 Asset 列表"""
    if isinstance(document, dict) and isinstance(document.get("assets"), list):
        document = document["assets"]

    if not isinstance(document, list):
        raise ManifestMalformedError(
            "资产索引解析失败: 顶层结构必须是列表",
            context={"type": type(document).__name__},
        )

    return [Asset.from_dict(entry) for entry in document]


class ManifestLoader:
    """资产索引加载器"""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owned_session = True
        return self._session

    async def load(self, index_path: str) -> List[Asset]:
        """
        加载资产索引

        Args:
            index_path: 本地路径或 http(s) 地址

        Returns:
            按索引顺序排列的 Asset 列表
        """
        if is_remote(index_path):
            text = await self._fetch_remote(index_path)
        else:
            text = await self._read_local(index_path)

        assets = parse_manifest(text)
        logger.debug(f"[索引] 从 {index_path} 读取到 {len(assets)} 个资产")
        return assets

    async def _fetch_remote(self, url: str) -> str:
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    raise ManifestUnavailableError(
                        f"获取资产索引失败 (状态码: {response.status})",
                        context={"url": url, "status": response.status},
                    )
                body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ManifestUnavailableError(
                f"获取资产索引失败: {url}", context={"url": url, "error": str(e)}
            ) from e

        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestMalformedError(
                "资产索引解析失败", context={"url": url, "error": str(e)}
            ) from e

    async def _read_local(self, index_path: str) -> str:
        if not os.path.isfile(index_path):
            raise ManifestUnavailableError(
                "索引文件不存在!", context={"path": index_path}
            )

        try:
            async with aiofiles.open(index_path, "r", encoding="utf-8") as f:
                return await f.read()
        except UnicodeDecodeError as e:
            raise ManifestMalformedError(
                "资产索引解析失败", context={"path": index_path, "error": str(e)}
            ) from e
        except OSError as e:
            raise ManifestUnavailableError(
                f"读取索引文件失败: {index_path}",
                context={"path": index_path, "error": str(e)},
            ) from e

    async def close(self):
        """关闭加载器"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
