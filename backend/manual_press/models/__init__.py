"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- VersionMeta: 语义化版本计数器
- SectionMarker/SectionMap: 章节起始页索引
- RenderedPages/PaginationResult: 渲染与分页产物
- PublishJob: 发布任务状态与生命周期
"""

from .job import JobProgress, JobStatus, PublishJob, PublishResult
from .rendered import BlobInfo, PaginationResult, RenderedPages
from .section import SectionMap, SectionMarker
from .version import BumpKind, VersionMeta, blob_key

__all__ = [
    "VersionMeta",
    "BumpKind",
    "blob_key",
    "SectionMarker",
    "SectionMap",
    "RenderedPages",
    "PaginationResult",
    "BlobInfo",
    "PublishJob",
    "PublishResult",
    "JobStatus",
    "JobProgress",
]
