"""
ModBundle 下载层

包含模组下载与暂存。
"""

from modbundle.download.fetcher import Fetcher

__all__ = [
    "Fetcher",
]
