"""
GitHub Release 客户端

通过 "latest release" 接口解析模组的下载地址。
"""

import asyncio
from typing import Optional

import aiohttp
from loguru import logger

from modbundle.models import BundleSettings, ModDescriptor
from modbundle.exceptions import AssetNotFoundError, DownloadNetworkError


class GitHubReleaseClient:
    """GitHub Release API 客户端"""

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

    @property
    def headers(self) -> dict:
        headers = {"Accept": "application/vnd.github+json"}
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token}"
        return headers

    def repo_of(self, mod: ModDescriptor) -> str:
        """从仓库地址中去掉固定前缀得到 owner/repo"""
        repo = mod.url
        if repo.startswith(self.settings.github_url_prefix):
            repo = repo[len(self.settings.github_url_prefix) :]
        return repo.strip("/")

    async def get_latest_release(self, repo: str) -> dict:
        """获取最新 release 信息"""
        url = f"{self.settings.github_api_base.rstrip('/')}/repos/{repo}/releases/latest"
        logger.debug(f"请求 {url}")
        try:
            async with self.session.get(url, headers=self.headers) as response:
                if response.status != 200:
                    raise DownloadNetworkError(
                        f"获取 {repo} 的最新 release 失败 (状态码: {response.status})",
                        context={"url": url},
                        status=response.status,
                    )
                return await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise DownloadNetworkError(
                f"获取 {repo} 的最新 release 失败: {e}", context={"url": url}
            ) from e

    async def resolve(self, mod: ModDescriptor) -> str:
        """
        解析下载地址

        Returns:
            第一个名称以 asset_name_starts_with 开头的资源的下载地址

        Raises:
            AssetNotFoundError: 没有匹配的资源
        """
        repo = self.repo_of(mod)
        release = await self.get_latest_release(repo)
        prefix = mod.asset_name_starts_with

        assets = release.get("assets") if isinstance(release, dict) else None
        if prefix and isinstance(assets, list):
            for asset in assets:
                if not isinstance(asset, dict):
                    continue
                name = asset.get("name")
                if isinstance(name, str) and name.startswith(prefix):
                    download_url = asset.get("browser_download_url")
                    if not download_url:
                        raise AssetNotFoundError(
                            f"资源 '{name}' 缺少下载地址",
                            context={"repo": repo, "asset": name},
                        )
                    logger.debug(f"模组 '{mod.name}' 选中资源 {name}")
                    return download_url

        raise AssetNotFoundError(
            f"模组 '{mod.name}' 的最新 release 中没有以 '{prefix}' 开头的资源",
            context={"repo": repo, "prefix": prefix},
        )

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()
