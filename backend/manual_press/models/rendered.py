"""
渲染产物模型 - 渲染器输出 / 分页结果 / 存储条目
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel

from .section import SectionMap


@dataclass
class RenderedPages:
    """一次渲染的输出：PDF字节 + 逐页纯文本（页序）"""
    pdf: bytes
    page_texts: list[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.page_texts)


@dataclass
class PaginationResult:
    """两遍分页结果"""
    pages: RenderedPages          # 第二遍渲染（最终版面）
    section_map: SectionMap       # 第一遍提取（页码注入依据）
    first_page_count: int
    final_page_count: int
    injected: dict[str, int] = field(default_factory=dict)

    @property
    def drifted(self) -> bool:
        """注入页码后页数是否变化"""
        return self.first_page_count != self.final_page_count


class BlobInfo(BaseModel):
    """对象存储条目"""
    key: str
    size: int
    uploaded_at: datetime
