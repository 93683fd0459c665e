"""
下载地址解析服务

按模组来源分派到对应的解析策略。
"""

from typing import Awaitable, Callable, Dict, Optional

import aiohttp

from modbundle.models import BundleSettings, ModDescriptor, ModSource
from modbundle.services.github import GitHubReleaseClient
from modbundle.services.thunderstore import ThunderstoreScraper
from modbundle.exceptions import DownloadError


class SourceResolver:
    """来源解析器"""

    def __init__(
        self,
        settings: BundleSettings,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.github = GitHubReleaseClient(settings, session)
        self.thunderstore = ThunderstoreScraper(settings, session)
        self._strategies: Dict[
            ModSource, Callable[[ModDescriptor], Awaitable[str]]
        ] = {
            ModSource.GITHUB: self.github.resolve,
            ModSource.THUNDERSTORE: self.thunderstore.resolve,
        }

    async def resolve(self, mod: ModDescriptor) -> str:
        """
        解析模组的下载地址

        Returns:
            可直接下载的 URL
        """
        strategy = self._strategies.get(mod.source)
        if strategy is None:
            raise DownloadError(
                f"不支持的模组来源: {mod.source}", context={"mod": mod.name}
            )
        return await strategy(mod)

    async def close(self):
        await self.github.close()
        await self.thunderstore.close()
