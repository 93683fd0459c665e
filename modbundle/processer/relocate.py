"""
单文件移动

把暂存的 dll 移动到 BepInEx 插件目录。
"""

import os

from modbundle.models import ModDescriptor
from modbundle.processer.base import BaseProcesser
from modbundle.exceptions import RelocationError


class PluginRelocator(BaseProcesser):
    """dll 模组移动器"""

    async def relocate(self, mod: ModDescriptor) -> str:
        """
        移动模组文件，目标目录必须已存在

        Returns:
            移动后的文件路径

        Raises:
            RelocationError: 暂存文件或目标目录不存在
        """
        filename = f"{mod.name}.dll"
        src_path = os.path.join(self.settings.mod_staging_dir(mod), filename)
        target_dir = self.settings.relocation_dir(mod)
        dest_path = os.path.join(target_dir, filename)

        if not os.path.isfile(src_path):
            raise RelocationError(
                f"暂存文件不存在: {src_path}", context={"mod": mod.name}
            )
        if not os.path.isdir(target_dir):
            raise RelocationError(
                f"目标目录不存在: {target_dir}", context={"mod": mod.name}
            )

        try:
            os.replace(src_path, dest_path)
        except OSError as e:
            raise RelocationError(
                f"移动文件失败: {e}",
                context={"mod": mod.name, "src": src_path, "dest": dest_path},
            ) from e

        return dest_path
