"""
阶段结果模型

每个模组在每个阶段的执行结果，协调器据此继续后续流程。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Stage(Enum):
    """处理阶段"""

    FETCH = "fetch"
    EXTRACT = "extract"
    RELOCATE = "relocate"
    PACKAGE = "package"


@dataclass
class StageResult:
    """单个阶段的执行结果"""

    name: str
    stage: Stage
    ok: bool
    error: Optional[Exception] = None
    skipped: bool = False

    @classmethod
    def success(cls, name: str, stage: Stage) -> "StageResult":
        return cls(name=name, stage=stage, ok=True)

    @classmethod
    def failure(cls, name: str, stage: Stage, error: Exception) -> "StageResult":
        return cls(name=name, stage=stage, ok=False, error=error)

    @classmethod
    def skip(cls, name: str, stage: Stage) -> "StageResult":
        return cls(name=name, stage=stage, ok=False, skipped=True)


@dataclass
class RunReport:
    """一次运行的汇总"""

    results: List[StageResult] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)
    archive_path: Optional[str] = None
    bytes_downloaded: int = 0

    def add(self, result: StageResult) -> StageResult:
        self.results.append(result)
        return result

    def for_stage(self, stage: Stage) -> List[StageResult]:
        return [r for r in self.results if r.stage == stage]

    def succeeded(self, stage: Stage) -> List[str]:
        """某阶段成功的模组名"""
        return [r.name for r in self.for_stage(stage) if r.ok]

    def failed(self, stage: Stage) -> List[str]:
        """某阶段失败的模组名（不含跳过）"""
        return [r.name for r in self.for_stage(stage) if not r.ok and not r.skipped]

    @property
    def packaged(self) -> bool:
        return any(r.ok for r in self.for_stage(Stage.PACKAGE))

    def summary(self) -> Dict[str, int]:
        """各阶段成功/失败数量"""
        stats: Dict[str, int] = {}
        for stage in Stage:
            results = self.for_stage(stage)
            stats[f"{stage.value}_ok"] = sum(1 for r in results if r.ok)
            stats[f"{stage.value}_failed"] = sum(
                1 for r in results if not r.ok and not r.skipped
            )
            stats[f"{stage.value}_skipped"] = sum(1 for r in results if r.skipped)
        stats["invalid"] = len(self.invalid)
        return stats
