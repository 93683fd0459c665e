"""
ModBundle 服务层

包含下载地址解析：GitHub Release 与 Thunderstore 页面。
"""

from modbundle.services.github import GitHubReleaseClient
from modbundle.services.thunderstore import ThunderstoreScraper
from modbundle.services.resolver import SourceResolver

__all__ = [
    "GitHubReleaseClient",
    "ThunderstoreScraper",
    "SourceResolver",
]
