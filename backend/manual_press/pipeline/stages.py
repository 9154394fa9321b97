"""
发布流水线阶段定义

职责：
1. 定义各阶段名称与进度区间
2. 提供阶段查找（进度更新用）
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StageEnum(str, Enum):
    """发布流水线阶段枚举"""
    VALIDATE = "VALIDATE"
    LOAD_SOURCE = "LOAD_SOURCE"
    RENDER_1 = "RENDER_1"
    EXTRACT = "EXTRACT"
    INJECT = "INJECT"
    RENDER_2 = "RENDER_2"
    VERIFY = "VERIFY"
    OVERLAY = "OVERLAY"
    UPLOAD = "UPLOAD"
    ADVANCE_VERSION = "ADVANCE_VERSION"


@dataclass
class PipelineStage:
    """流水线阶段"""
    name: str
    progress_start: int  # 进度起点（0-100）
    progress_end: int    # 进度终点


# 发布流水线各阶段配置
PUBLISH_STAGES: list[PipelineStage] = [
    PipelineStage(StageEnum.VALIDATE.value, 0, 2),
    PipelineStage(StageEnum.LOAD_SOURCE.value, 2, 10),
    PipelineStage(StageEnum.RENDER_1.value, 10, 40),
    PipelineStage(StageEnum.EXTRACT.value, 40, 45),
    PipelineStage(StageEnum.INJECT.value, 45, 50),
    PipelineStage(StageEnum.RENDER_2.value, 50, 80),
    PipelineStage(StageEnum.VERIFY.value, 80, 82),
    PipelineStage(StageEnum.OVERLAY.value, 82, 90),
    PipelineStage(StageEnum.UPLOAD.value, 90, 98),
    PipelineStage(StageEnum.ADVANCE_VERSION.value, 98, 100),
]

_STAGES_BY_NAME = {stage.name: stage for stage in PUBLISH_STAGES}


def get_stage(name: str) -> PipelineStage:
    return _STAGES_BY_NAME[name]
