"""
下载器

解析模组下载地址并把响应流写入暂存目录。
"""

import asyncio
import os
from typing import Optional

import aiohttp
import aiofiles
from loguru import logger

from modbundle.models import BundleSettings, ModDescriptor
from modbundle.services import SourceResolver
from modbundle.exceptions import (
    DownloadError,
    DownloadNetworkError,
    DownloadFileError,
)


class Fetcher:
    """模组下载器"""

    def __init__(
        self,
        settings: BundleSettings,
        session: Optional[aiohttp.ClientSession] = None,
        resolver: Optional[SourceResolver] = None,
    ):
        self.settings = settings
        self._session = session
        self._owned_session = session is None
        self.resolver = resolver or SourceResolver(settings, session)
        self.bytes_downloaded = 0

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owned_session = True
        return self._session

    async def fetch(self, mod: ModDescriptor) -> str:
        """
        下载单个模组到暂存目录

        Args:
            mod: 模组描述

        Returns:
            暂存文件路径

        Raises:
            DownloadError: 解析地址、请求或写入失败
        """
        url = await self.resolver.resolve(mod)
        staging_dir = self._ensure_staging_dir(mod)
        file_path = os.path.join(staging_dir, mod.filename)
        await self.download_file(url, file_path)
        return file_path

    def _ensure_staging_dir(self, mod: ModDescriptor) -> str:
        staging_dir = self.settings.mod_staging_dir(mod)
        if not os.path.isdir(staging_dir):
            try:
                # 不递归创建，暂存根目录必须已存在
                os.mkdir(staging_dir)
            except OSError as e:
                raise DownloadFileError(
                    f"无法创建暂存目录: {staging_dir}",
                    context={"mod": mod.name, "error": str(e)},
                ) from e
        return staging_dir

    async def download_file(self, url: str, file_path: str) -> None:
        """
        以流式方式下载文件

        Args:
            url: 下载地址
            file_path: 目标文件路径
        """
        filename = os.path.basename(file_path)
        logger.info(f"[开始] 下载: {filename}")

        try:
            async with self.session.get(url) as response:
                if not response.ok:
                    raise DownloadNetworkError(
                        f"从 {url} 下载失败: HTTP {response.status} {response.reason or ''}".rstrip(),
                        context={"url": url},
                        status=response.status,
                    )

                total_size = int(response.headers.get("Content-Length", 0))
                if total_size:
                    logger.info(f"[信息] 文件大小: {total_size / (1024 * 1024):.2f} MB")

                async with aiofiles.open(file_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(
                        self.settings.chunk_size
                    ):
                        await f.write(chunk)
                        self.bytes_downloaded += len(chunk)

        except DownloadError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
            # 清理不完整的文件
            if os.path.exists(file_path):
                try:
                    os.remove(file_path)
                except OSError:
                    pass
            raise DownloadNetworkError(
                f"下载 '{filename}' 失败: {e}", context={"url": url}
            ) from e

        logger.success(f"[完成] '{filename}' 下载完成")

    async def close(self):
        """关闭下载器"""
        await self.resolver.close()
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()
