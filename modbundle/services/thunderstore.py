"""
Thunderstore 页面解析

抓取包页面 HTML，用正则找出下载按钮的链接。
"""

import asyncio
import re
from typing import List, Optional

import aiohttp
from loguru import logger

from modbundle.models import BundleSettings, ModDescriptor
from modbundle.exceptions import AssetNotFoundError, DownloadNetworkError

BUTTON_PATTERN = re.compile(r'<a.*?type="button".*?>')
HREF_PATTERN = re.compile(r'href="(.*?)"')


def find_buttons(html: str) -> List[str]:
    """返回所有 type="button" 的 <a> 标签"""
    return BUTTON_PATTERN.findall(html)


def find_download_url(buttons: List[str], prefix: str) -> Optional[str]:
    """返回第一个 href 以 prefix 开头的链接"""
    for button in buttons:
        href = HREF_PATTERN.search(button)
        if href and href.group(1).startswith(prefix):
            return href.group(1)
    return None


class ThunderstoreScraper:
    """Thunderstore 包页面解析器"""

    def __init__(
        self,
        settings: BundleSettings,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.settings = settings
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owned_session = True
        return self._session

    async def get_page(self, url: str) -> str:
        """获取页面文本"""
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    raise DownloadNetworkError(
                        f"获取页面失败 (状态码: {response.status})",
                        context={"url": url},
                        status=response.status,
                    )
                return await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise DownloadNetworkError(
                f"获取页面失败: {e}", context={"url": url}
            ) from e

    async def resolve(self, mod: ModDescriptor) -> str:
        """
        解析下载地址

        Raises:
            AssetNotFoundError: 页面中没有按钮，或没有指向下载地址的按钮
        """
        html = await self.get_page(mod.url)

        buttons = find_buttons(html)
        if not buttons:
            raise AssetNotFoundError(
                f"模组 '{mod.name}' 的页面中没有找到按钮",
                context={"url": mod.url},
            )

        download_url = find_download_url(
            buttons, self.settings.thunderstore_download_prefix
        )
        if not download_url:
            raise AssetNotFoundError(
                f"模组 '{mod.name}' 的页面中没有找到下载地址",
                context={"url": mod.url, "buttons": len(buttons)},
            )

        logger.debug(f"模组 '{mod.name}' 下载地址: {download_url}")
        return download_url

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()
