"""
ModBundle 处理层

包含 zip 解压与 dll 移动。
"""

from modbundle.processer.base import BaseProcesser
from modbundle.processer.extract import ArchiveExtractor
from modbundle.processer.relocate import PluginRelocator

__all__ = [
    "BaseProcesser",
    "ArchiveExtractor",
    "PluginRelocator",
]
