"""
压缩包解压

把暂存的 zip 解压到输出目录根部，同名文件直接覆盖。
"""

import os
import zipfile

from loguru import logger

from modbundle.models import ModDescriptor
from modbundle.processer.base import BaseProcesser
from modbundle.exceptions import ExtractionError


def is_safe_member(dest_dir: str, member: str) -> bool:
    """检查压缩包成员解压后是否仍位于目标目录内"""
    base = os.path.realpath(dest_dir)
    target = os.path.realpath(os.path.join(base, member))
    return target == base or target.startswith(base + os.sep)


class ArchiveExtractor(BaseProcesser):
    """zip 模组解压器"""

    def _ensure_output_dir(self) -> str:
        output_dir = self.settings.output_dir
        if not os.path.isdir(output_dir):
            try:
                os.mkdir(output_dir)
            except OSError as e:
                raise ExtractionError(
                    f"无法创建输出目录: {output_dir}", context={"error": str(e)}
                ) from e
        return output_dir

    async def extract(self, mod: ModDescriptor) -> None:
        """
        解压模组

        Raises:
            ExtractionError: 暂存文件不存在、不是有效 zip 或包含越界路径
        """
        output_dir = self._ensure_output_dir()
        zip_path = os.path.join(self.settings.mod_staging_dir(mod), f"{mod.name}.zip")

        if not os.path.isfile(zip_path):
            raise ExtractionError(
                f"暂存文件不存在: {zip_path}", context={"mod": mod.name}
            )

        try:
            with zipfile.ZipFile(zip_path, "r") as zf:
                members = zf.namelist()
                for member in members:
                    if not is_safe_member(output_dir, member):
                        raise ExtractionError(
                            f"压缩包包含越界路径: '{member}'",
                            context={"mod": mod.name, "member": member},
                        )
                zf.extractall(output_dir)
        except zipfile.BadZipFile as e:
            raise ExtractionError(
                f"不是有效的 zip 文件: {zip_path}", context={"mod": mod.name}
            ) from e
        except OSError as e:
            raise ExtractionError(
                f"解压失败: {e}", context={"mod": mod.name}
            ) from e

        logger.debug(f"[解压] {len(members)} 个条目已解压到 {output_dir}")
