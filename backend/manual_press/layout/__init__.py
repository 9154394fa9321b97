"""
排版引擎 - 两遍分页与页眉页脚叠加

子模块：
- source: 源文档加载与目录页码占位符
- renderer: HTML渲染PDF（WeasyPrint）+ 逐页文本（pdfplumber）
- markers: FWMARK 章节标记提取
- paginator: 两遍分页驱动
- overlay: 页眉/页码/分隔线叠加（PyMuPDF）
"""

from .markers import MarkerExtractor, format_marker
from .overlay import FitzPageSurface, HeaderFooterOverlay, PdfPages
from .paginator import PaginationDriver
from .renderer import WeasyRenderer, extract_page_texts, page_css
from .source import SourceDocument, SourceLoader

__all__ = [
    "MarkerExtractor",
    "format_marker",
    "HeaderFooterOverlay",
    "FitzPageSurface",
    "PdfPages",
    "PaginationDriver",
    "WeasyRenderer",
    "extract_page_texts",
    "page_css",
    "SourceDocument",
    "SourceLoader",
]
