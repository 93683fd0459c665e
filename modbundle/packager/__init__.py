"""
ModBundle 打包层

包含 zip 生成器。
"""

from modbundle.packager.zip import ZipBuilder

__all__ = [
    "ZipBuilder",
]
