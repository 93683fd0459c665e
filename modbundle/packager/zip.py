"""
ZIP 生成器

实现目录压缩功能。
"""

import asyncio
import os
import zipfile

from modbundle.exceptions import PackagingError


class ZipBuilder:
    """ZIP 构建器"""

    def __init__(self, compress_level: int = 9):
        self.compress_level = compress_level

    async def build(self, source_dir: str, archive_path: str) -> str:
        """
        构建 ZIP 文件，返回时文件已写完并关闭

        Args:
            source_dir: 源文件目录
            archive_path: 压缩包路径

        Returns:
            生成的文件路径
        """
        try:
            os.makedirs(source_dir, exist_ok=True)
            await asyncio.to_thread(self._write, source_dir, archive_path)
            return archive_path

        except Exception as e:
            if os.path.exists(f"{archive_path}.part"):
                os.remove(f"{archive_path}.part")
            raise PackagingError(
                f"构建 ZIP 失败: {e}",
                context={"source_dir": source_dir, "archive_path": archive_path},
            ) from e

    def _write(self, source_dir: str, archive_path: str) -> None:
        archive_real = os.path.realpath(archive_path)
        tmp_path = f"{archive_path}.part"

        with zipfile.ZipFile(
            tmp_path,
            "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=self.compress_level,
        ) as zf:
            for root, dirs, files in os.walk(source_dir):
                dirs.sort()
                rel_root = os.path.relpath(root, source_dir)
                if rel_root != os.curdir:
                    zf.write(root, rel_root.replace(os.sep, "/") + "/")
                for name in sorted(files):
                    path = os.path.join(root, name)
                    # 压缩包位于源目录内时跳过自身
                    if os.path.realpath(path) in (archive_real, os.path.realpath(tmp_path)):
                        continue
                    arcname = os.path.relpath(path, source_dir).replace(os.sep, "/")
                    zf.write(path, arcname)

        os.replace(tmp_path, archive_path)
