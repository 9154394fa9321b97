"""
流水线模块 - 发布编排

子模块：
- stages: 发布流水线各阶段定义
- publisher: 发布编排器（版本/分页/叠加/存储）
"""

from .publisher import Publisher
from .stages import PUBLISH_STAGES, PipelineStage, StageEnum

__all__ = [
    "PipelineStage",
    "PUBLISH_STAGES",
    "StageEnum",
    "Publisher",
]
