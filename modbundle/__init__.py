"""
ModBundle - BepInEx 模组下载打包工具

从 GitHub Release 和 Thunderstore 下载模组，整理到输出目录并打包为 output.zip。
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
