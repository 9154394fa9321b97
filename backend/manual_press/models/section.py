"""
章节模型 - SectionMarker / SectionMap

SectionMap 由第一遍渲染的文本扫描得到，按 start_page 升序：
- label_for_page: 页码 → 当前章节标签（页眉用）
- start_page_for_id: 章节id → 起始页（目录页码注入用）

不持久化，单次发布内有效。
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, Field


class SectionMarker(BaseModel):
    """章节标记"""
    id: str
    label: str
    start_page: int = Field(..., ge=1)

    model_config = {"frozen": True}


class SectionMap:
    """页码 → 章节的有序索引"""

    def __init__(self, markers: Iterable[SectionMarker] = ()):
        # sorted() 是稳定排序，同页标记保持发现顺序
        self._markers: list[SectionMarker] = sorted(markers, key=lambda m: m.start_page)

    def __iter__(self) -> Iterator[SectionMarker]:
        return iter(self._markers)

    def __len__(self) -> int:
        return len(self._markers)

    def __bool__(self) -> bool:
        return bool(self._markers)

    def __repr__(self) -> str:
        items = ", ".join(f"{m.id}@{m.start_page}" for m in self._markers)
        return f"SectionMap([{items}])"

    @property
    def markers(self) -> tuple[SectionMarker, ...]:
        return tuple(self._markers)

    @property
    def first_page(self) -> int | None:
        """第一个章节的起始页（之前的页为封面）"""
        return self._markers[0].start_page if self._markers else None

    def label_for_page(self, page: int) -> str | None:
        """取 start_page <= page 的最后一个章节标签；封面页返回None"""
        for marker in reversed(self._markers):
            if marker.start_page <= page:
                return marker.label
        return None

    def start_page_for_id(self, section_id: str) -> int | None:
        """按章节id查起始页"""
        for marker in self._markers:
            if marker.id == section_id:
                return marker.start_page
        return None

    def to_dict(self) -> list[dict]:
        return [m.model_dump() for m in self._markers]
