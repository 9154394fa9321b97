"""
PDF渲染引擎 - 源文档HTML导出分页PDF

职责：
1. 按版式几何（纸张/页边距）渲染HTML为PDF（WeasyPrint）
2. 不绘制页眉/页脚（由Overlay在成品页上追加）
3. 逐页提取纯文本供标记提取（pdfplumber）
4. 渲染在子进程中执行，超时即终止子进程并使整次发布失败

依赖：
- weasyprint: HTML → PDF（命令行，子进程）
- pdfplumber: PDF逐页文本

测试要点：
- test_page_css: @page 几何样式
- test_render_timeout: 超时转为RenderError
- test_extract_page_texts: 逐页文本提取
"""

from __future__ import annotations

import io
import logging
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pdfplumber

from ..config import get_config
from ..interfaces import IRenderer, RenderError
from ..models import RenderedPages

if TYPE_CHECKING:
    from ..config import LayoutConfig
    from .source import SourceDocument

logger = logging.getLogger(__name__)


def page_css(layout: LayoutConfig) -> str:
    """版式几何 → @page 样式"""
    page = layout.page
    return f"@page {{ size: {page.format}; margin: {page.margin.as_css()}; }}"


def extract_page_texts(pdf: bytes) -> list[str]:
    """逐页提取纯文本（页序）"""
    try:
        with pdfplumber.open(io.BytesIO(pdf)) as doc:
            return [page.extract_text() or "" for page in doc.pages]
    except Exception as e:
        raise RenderError(f"PDF文本提取失败: {e}") from e


class WeasyRenderer(IRenderer):
    """WeasyPrint渲染器实现（子进程渲染，超时即终止子进程）"""

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout or get_config().timeouts.render_sec

    def render(self, document: SourceDocument, layout: LayoutConfig) -> RenderedPages:
        """渲染并提取逐页文本"""
        pdf = self._render_pdf(document.html, document.base_url, layout)
        pages = RenderedPages(pdf=pdf, page_texts=extract_page_texts(pdf))
        logger.info(f"渲染完成: {pages.page_count} 页 ({len(pdf) / 1024:.1f} KB)")
        return pages

    def _render_pdf(self, html: str, base_url: str | None, layout: LayoutConfig) -> bytes:
        """通过WeasyPrint命令行渲染PDF"""
        with tempfile.TemporaryDirectory(prefix="manual_press_") as tmpdir:
            work_dir = Path(tmpdir)
            html_path = work_dir / "document.html"
            css_path = work_dir / "page.css"
            pdf_path = work_dir / "document.pdf"
            html_path.write_text(html, encoding="utf-8")
            css_path.write_text(page_css(layout), encoding="utf-8")

            cmd = self._command(html_path, css_path, pdf_path, base_url)
            try:
                subprocess.run(
                    cmd,
                    capture_output=True,
                    timeout=self.timeout,
                    check=True,
                )
            except subprocess.TimeoutExpired as e:
                raise RenderError(f"渲染超时({self.timeout}s): {html_path.name}") from e
            except subprocess.CalledProcessError as e:
                stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
                raise RenderError(f"WeasyPrint渲染失败: {stderr}") from e
            except OSError as e:
                raise RenderError(f"无法启动WeasyPrint: {e}") from e

            if not pdf_path.exists():
                raise RenderError(f"WeasyPrint未生成PDF: {pdf_path}")
            return pdf_path.read_bytes()

    def _command(
        self, html_path: Path, css_path: Path, pdf_path: Path, base_url: str | None
    ) -> list[str]:
        cmd = [
            sys.executable, "-m", "weasyprint",
            "--encoding", "utf-8",
            "--stylesheet", str(css_path),
        ]
        if base_url:
            cmd += ["--base-url", base_url]
        cmd += [str(html_path), str(pdf_path)]
        return cmd
