"""
页眉页脚叠加 - 在成品PDF页上追加页眉/页码/分隔线

职责：
1. 按 SectionMap 确定每页章节标签，无标签（封面）整页跳过
2. 奇数页（recto）：章节标签在外侧（右），版本号在内侧（左），页码靠右
   偶数页（verso）：左右镜像
3. 页眉基线在上边距带内垂直居中；页码距底边固定偏移
4. 上/下边距边界各画一条整宽分隔线
5. 只追加绘制操作，不改动原有内容；每次发布只装饰一次

依赖：
- PyMuPDF (fitz): PDF页面绘制与等宽字体测宽

测试要点：
- test_recto_verso_mirror: 奇偶页标签/版本x坐标互换
- test_cover_page_skipped: 封面无装饰
- test_overlay_applied_once: 重复调用不重复绘制
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import fitz

from ..interfaces import RGB, IPageDocument, IPageSurface, RenderError

if TYPE_CHECKING:
    from ..config import LayoutConfig
    from ..models import SectionMap

logger = logging.getLogger(__name__)

MONOSPACE_FONT = "cour"
RULE_THICKNESS = 0.75


# ============================================================================
# PyMuPDF 页面实现
# ============================================================================

class FitzPageSurface(IPageSurface):
    """PyMuPDF页面绘制面（对外使用左下角原点坐标）"""

    def __init__(self, page: fitz.Page):
        self.page = page

    @property
    def width(self) -> float:
        return self.page.rect.width

    @property
    def height(self) -> float:
        return self.page.rect.height

    def text_width(self, text: str, font_size: float) -> float:
        return fitz.get_text_length(text, fontname=MONOSPACE_FONT, fontsize=font_size)

    def draw_text(self, text: str, x: float, y: float, font_size: float, color: RGB) -> None:
        self.page.insert_text(
            self._point(x, y),
            text,
            fontname=MONOSPACE_FONT,
            fontsize=font_size,
            color=color,
        )

    def draw_line(
        self,
        start: tuple[float, float],
        end: tuple[float, float],
        thickness: float,
        color: RGB,
    ) -> None:
        self.page.draw_line(self._point(*start), self._point(*end), color=color, width=thickness)

    def _point(self, x: float, y: float) -> fitz.Point:
        # fitz 原点在左上角，y 向下
        return fitz.Point(x, self.height - y)


class PdfPages(IPageDocument):
    """PyMuPDF文档封装"""

    def __init__(self, doc: fitz.Document):
        self.doc = doc
        self.decorated = False

    @classmethod
    def from_bytes(cls, data: bytes) -> PdfPages:
        try:
            return cls(fitz.open(stream=data, filetype="pdf"))
        except Exception as e:
            raise RenderError(f"无法打开渲染结果PDF: {e}") from e

    def pages(self) -> Iterator[IPageSurface]:
        for page in self.doc:
            yield FitzPageSurface(page)

    def page_count(self) -> int:
        return self.doc.page_count

    def to_bytes(self) -> bytes:
        return self.doc.tobytes(garbage=3, deflate=True)

    def close(self) -> None:
        self.doc.close()

    def __enter__(self) -> PdfPages:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


# ============================================================================
# 版面计算
# ============================================================================

@dataclass
class TextPlacement:
    text: str
    x: float
    y: float
    font_size: float
    color: RGB


@dataclass
class PagePlan:
    """单页装饰方案"""
    page_no: int
    recto: bool
    section: TextPlacement
    version: TextPlacement
    page_number: TextPlacement
    rules: list[tuple[float, float, float]] = field(default_factory=list)  # (x0, x1, y)


class HeaderFooterOverlay:
    """页眉页脚叠加器"""

    def __init__(self, layout: LayoutConfig):
        self.layout = layout

    def apply(self, document: IPageDocument, section_map: SectionMap, version_label: str) -> int:
        """装饰整份文档，返回已装饰页数"""
        if document.decorated:
            logger.warning("文档已装饰过，跳过重复叠加")
            return 0

        decorated = 0
        for page_no, surface in enumerate(document.pages(), start=1):
            label = section_map.label_for_page(page_no)
            if label is None:
                continue
            self.draw(surface, self.plan(surface, page_no, label, version_label))
            decorated += 1

        document.decorated = True
        logger.info(f"页眉页脚叠加完成: {decorated}/{document.page_count()} 页")
        return decorated

    def plan(self, surface: IPageSurface, page_no: int, label: str, version_label: str) -> PagePlan:
        """计算单页各元素位置（PDF坐标，左下角原点）"""
        layout = self.layout
        header = layout.header
        pn_cfg = layout.page_number

        width, height = surface.width, surface.height
        recto = page_no % 2 == 1

        header_line_y = height - layout.top_pt
        text_y = header_line_y + (layout.top_pt - header.font_size) / 2
        pn_y = layout.page_number_y_pt

        section_text = f"{header.section_prefix}{label}"
        pn_text = str(page_no)

        section_w = surface.text_width(section_text, header.font_size)
        version_w = surface.text_width(version_label, header.font_size)
        pn_w = surface.text_width(pn_text, pn_cfg.font_size)

        left_x = layout.left_pt
        right_edge = width - layout.right_pt

        if recto:
            section_x = right_edge - section_w
            version_x = left_x
            pn_x = right_edge - pn_w
        else:
            section_x = left_x
            version_x = right_edge - version_w
            pn_x = left_x

        text_rgb = header.text_rgb
        return PagePlan(
            page_no=page_no,
            recto=recto,
            section=TextPlacement(section_text, section_x, text_y, header.font_size, text_rgb),
            version=TextPlacement(version_label, version_x, text_y, header.font_size, text_rgb),
            page_number=TextPlacement(pn_text, pn_x, pn_y, pn_cfg.font_size, pn_cfg.rgb),
            rules=[(0, width, header_line_y), (0, width, layout.bottom_pt)],
        )

    def draw(self, surface: IPageSurface, plan: PagePlan) -> None:
        for item in (plan.section, plan.version, plan.page_number):
            surface.draw_text(item.text, item.x, item.y, item.font_size, item.color)

        border_rgb = self.layout.header.border_rgb
        for x0, x1, y in plan.rules:
            surface.draw_line((x0, y), (x1, y), RULE_THICKNESS, border_rgb)
