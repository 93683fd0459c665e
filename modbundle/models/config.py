"""
配置数据模型

定义模组清单条目与运行配置（路径、来源地址）。
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from modbundle.exceptions import ConfigValidationError


class ModSource(Enum):
    """模组来源"""

    GITHUB = "github"
    THUNDERSTORE = "thunderstoreIo"


class AssetType(Enum):
    """下载文件类型，值即暂存文件扩展名"""

    ZIP = "zip"
    DLL = "dll"


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


@dataclass(frozen=True)
class ModDescriptor:
    """
    模组清单条目。

    运行期间不可变，name 同时作为暂存目录名和文件名。
    """

    name: str
    source: ModSource
    url: str
    asset_type: AssetType
    asset_name_starts_with: Optional[str] = None
    move_in_bepinex: bool = False
    move_in_bepinex_plugins: bool = True

    @property
    def filename(self) -> str:
        """暂存文件名"""
        return f"{self.name}.{self.asset_type.value}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModDescriptor":
        """
        从清单条目创建描述对象，兼容 camelCase 与 snake_case 键名。

        Raises:
            ConfigValidationError: 缺少必填字段或枚举值无效
        """
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"模组条目必须是对象: {data!r}", context={"entry": repr(data)}
            )

        missing = [
            key
            for key, aliases in (
                ("name", ("name",)),
                ("source", ("source",)),
                ("url", ("url",)),
                ("assetType", ("assetType", "asset_type")),
            )
            if _pick(data, *aliases) in (None, "")
        ]
        if missing:
            raise ConfigValidationError(
                f"模组条目缺少字段: {', '.join(missing)}",
                context={"entry": data, "missing": missing},
            )

        name = str(data["name"])
        try:
            source = ModSource(data["source"])
            asset_type = AssetType(_pick(data, "assetType", "asset_type"))
        except ValueError as e:
            raise ConfigValidationError(
                f"模组 '{name}' 配置无效: {e}", context={"entry": data}
            ) from e

        return cls(
            name=name,
            source=source,
            url=str(data["url"]),
            asset_type=asset_type,
            asset_name_starts_with=_pick(
                data, "assetNameStartsWith", "asset_name_starts_with"
            ),
            move_in_bepinex=bool(
                _pick(data, "moveInBepInEx", "move_in_bepinex", default=False)
            ),
            move_in_bepinex_plugins=bool(
                _pick(
                    data,
                    "moveInBepInExPlugins",
                    "move_in_bepinex_plugins",
                    default=True,
                )
            ),
        )


@dataclass
class BundleSettings:
    """
    运行配置

    所有组件从这里获取路径与远程地址，测试可将 root 指向临时目录。
    """

    root: str = field(default_factory=os.getcwd)
    staging_dir: Optional[str] = None
    output_dir: Optional[str] = None
    archive_path: Optional[str] = None
    plugin_subdir: Tuple[str, ...] = ("BepInEx", "plugins")
    github_url_prefix: str = "https://github.com/"
    github_api_base: str = "https://api.github.com"
    github_token: Optional[str] = None
    thunderstore_download_prefix: str = "https://thunderstore.io/package/download/"
    compress_level: int = 9
    chunk_size: int = 8192
    skip_failed: bool = False

    def __post_init__(self):
        self.root = os.path.abspath(self.root)
        if self.staging_dir is None:
            self.staging_dir = os.path.join(self.root, "tmp")
        if self.output_dir is None:
            self.output_dir = os.path.join(self.root, "output")
        if self.archive_path is None:
            self.archive_path = os.path.join(self.root, "output.zip")
        # 相对路径以 root 为基准
        self.staging_dir = os.path.join(self.root, self.staging_dir)
        self.output_dir = os.path.join(self.root, self.output_dir)
        self.archive_path = os.path.join(self.root, self.archive_path)
        if self.github_token is None:
            self.github_token = os.environ.get("GITHUB_TOKEN") or None
        self.plugin_subdir = tuple(self.plugin_subdir)

    @property
    def bepinex_dir(self) -> str:
        """BepInEx 根目录"""
        return os.path.join(self.output_dir, self.plugin_subdir[0])

    @property
    def plugins_dir(self) -> str:
        """插件目录"""
        return os.path.join(self.output_dir, *self.plugin_subdir)

    def mod_staging_dir(self, mod: ModDescriptor) -> str:
        """单个模组的暂存目录"""
        return os.path.join(self.staging_dir, mod.name)

    def staged_file(self, mod: ModDescriptor) -> str:
        """单个模组的暂存文件路径"""
        return os.path.join(self.mod_staging_dir(mod), mod.filename)

    def relocation_dir(self, mod: ModDescriptor) -> str:
        """单文件模组的目标目录"""
        if mod.move_in_bepinex_plugins:
            return self.plugins_dir
        if mod.move_in_bepinex:
            return self.bepinex_dir
        return self.output_dir

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None, **overrides):
        """从清单的 settings 表创建配置，忽略未知键"""
        data = dict(data or {})
        data.update({k: v for k, v in overrides.items() if v is not None})
        known = set(cls.__dataclass_fields__)
        return cls(**{k: v for k, v in data.items() if k in known})
