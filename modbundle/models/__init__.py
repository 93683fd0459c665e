"""
ModBundle 数据模型包

包含配置模型和阶段结果模型定义。
"""

from modbundle.models.config import (
    ModSource,
    AssetType,
    ModDescriptor,
    BundleSettings,
)
from modbundle.models.result import (
    Stage,
    StageResult,
    RunReport,
)

__all__ = [
    # 配置模型
    "ModSource",
    "AssetType",
    "ModDescriptor",
    "BundleSettings",
    # 结果模型
    "Stage",
    "StageResult",
    "RunReport",
]
