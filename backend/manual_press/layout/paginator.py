"""
分页驱动 - 两遍渲染与目录页码注入

流程（线性，不重试）：
1. RENDER_1: 按版式几何渲染，无页眉页脚装饰
2. EXTRACT:  扫描第一遍逐页文本得到 SectionMap，记录页数1
3. INJECT:   除目录标记外的每个章节，向源文档目录占位符写入起始页
4. RENDER_2: 同几何重新渲染修改后的源文档，记录页数2
5. VERIFY:   页数1 != 页数2 仅告警（页码位数变化可能导致换行），
             继续使用第二遍页面 + 第一遍 SectionMap，不做校正

任一遍渲染失败即抛出 RenderError，整次发布中止。

测试要点：
- test_paginate_injects_page_numbers: 页码注入源文档
- test_paginate_skips_toc_marker: 目录标记不注入
- test_paginate_drift_warning: 页数漂移告警
- test_paginate_render_failure: 渲染失败中止
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..models import PaginationResult
from .markers import MarkerExtractor

if TYPE_CHECKING:
    from ..config import LayoutConfig
    from ..interfaces import IRenderer
    from ..models import SectionMap
    from .source import SourceDocument

logger = logging.getLogger(__name__)


class PaginationDriver:
    """两遍分页驱动"""

    def __init__(
        self,
        renderer: IRenderer,
        layout: LayoutConfig,
        extractor: MarkerExtractor | None = None,
    ):
        self.renderer = renderer
        self.layout = layout
        self.extractor = extractor or MarkerExtractor()

    def paginate(
        self,
        document: SourceDocument,
        on_stage: Callable[[str], None] | None = None,
    ) -> PaginationResult:
        """执行两遍分页"""
        notify = on_stage or (lambda stage: None)

        notify("RENDER_1")
        first = self.renderer.render(document, self.layout)

        notify("EXTRACT")
        section_map = self.extractor.extract(first.page_texts)
        first_count = first.page_count

        notify("INJECT")
        injected = self.inject_page_numbers(document, section_map)

        notify("RENDER_2")
        final = self.renderer.render(document, self.layout)
        final_count = final.page_count

        notify("VERIFY")
        result = PaginationResult(
            pages=final,
            section_map=section_map,
            first_page_count=first_count,
            final_page_count=final_count,
            injected=injected,
        )
        if result.drifted:
            logger.warning(
                f"注入页码后页数变化: {first_count} → {final_count}，"
                f"章节边界附近的页眉可能偏移"
            )
        return result

    def inject_page_numbers(self, document: SourceDocument, section_map: SectionMap) -> dict[str, int]:
        """向源文档目录占位符写入章节起始页，返回已写入的 {id: 页码}"""
        injected: dict[str, int] = {}
        for marker in section_map:
            if marker.id == self.extractor.toc_id:
                continue
            if marker.id in injected:
                continue
            if document.set_page_number(marker.id, marker.start_page):
                injected[marker.id] = marker.start_page

        logger.info(f"目录页码注入 {len(injected)} 项")
        return injected
