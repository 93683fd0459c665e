"""
模组清单加载

读取 modlist 文件并返回其中的 mods 列表，按扩展名选择 JSON/TOML/YAML 解析。
"""

import json
import os
from typing import Any, Dict, List, Optional

import aiofiles
import toml
import yaml
from loguru import logger

from modbundle.exceptions import ConfigParseError

DEFAULT_MANIFEST = "modlist.json"


class ManifestLoader:
    """模组清单加载器"""

    def __init__(self, path: str = DEFAULT_MANIFEST):
        self.path = os.path.abspath(path)
        self._document: Optional[Dict[str, Any]] = None

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    async def read(self) -> Optional[Dict[str, Any]]:
        """
        读取并解析清单文件

        Returns:
            清单内容，文件不存在时返回 None

        Raises:
            ConfigParseError: 文件格式不支持或内容无法解析
        """
        if self._document is not None:
            return self._document

        logger.debug(f"清单路径: {self.path}")
        if not self.exists():
            logger.warning(f"未找到模组清单: {self.path}")
            return None

        async with aiofiles.open(self.path, "rb") as f:
            raw = await f.read()

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ConfigParseError(
                f"清单不是有效的 UTF-8 文本: {e}", context={"path": self.path}
            ) from e

        document = self._parse(text)
        if not isinstance(document, dict):
            raise ConfigParseError(
                "清单顶层必须是对象", context={"path": self.path}
            )
        self._document = document
        return document

    def _parse(self, text: str) -> Any:
        suffix = os.path.splitext(self.path)[1].lower()
        try:
            if suffix == ".json":
                return json.loads(text)
            elif suffix == ".toml":
                return toml.loads(text)
            elif suffix in (".yaml", ".yml"):
                return yaml.safe_load(text)
        except (ValueError, toml.TomlDecodeError, yaml.YAMLError) as e:
            raise ConfigParseError(
                f"清单解析失败: {e}", context={"path": self.path}
            ) from e
        raise ConfigParseError(
            f"不支持的清单格式: {suffix}", context={"path": self.path}
        )

    async def load(self) -> Optional[List[Any]]:
        """
        加载模组列表

        Returns:
            mods 字段（缺省为空列表），清单不存在时返回 None
        """
        document = await self.read()
        if document is None:
            return None

        mods = document.get("mods")
        if mods is None:
            return []
        if not isinstance(mods, list):
            raise ConfigParseError(
                "mods 字段必须是列表", context={"path": self.path}
            )
        return mods

    async def load_settings(self) -> Dict[str, Any]:
        """加载可选的 settings 表"""
        document = await self.read()
        if not document:
            return {}
        settings = document.get("settings") or {}
        if not isinstance(settings, dict):
            raise ConfigParseError(
                "settings 字段必须是对象", context={"path": self.path}
            )
        return settings
