"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(layout, fake_renderer):
        renderer = fake_renderer([["FWMARK-TOC"], ["正文"]])
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Generator

import fitz
import pytest

from manual_press.config import LayoutConfig, RuntimeConfig, StorageConfig
from manual_press.interfaces import RGB, IPageDocument, IPageSurface, IRenderer
from manual_press.layout import SourceDocument
from manual_press.models import RenderedPages

A5_WIDTH = 419.53
A5_HEIGHT = 595.28


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def layout() -> LayoutConfig:
    """默认版式（A5，上1.5cm 右1.5cm 下1.2cm 左1.5cm）"""
    return LayoutConfig()


@pytest.fixture
def runtime_config(temp_dir: Path) -> RuntimeConfig:
    """运行期配置（存储指向临时目录）"""
    return RuntimeConfig(storage=StorageConfig(root_dir=temp_dir / "storage"))


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


SAMPLE_HTML = """<!doctype html>
<html>
<head>
  <meta charset="utf-8"><title>Manual</title>
  <style>.fw-page + .fw-page { break-before: page; }</style>
</head>
<body data-pdf-ready="true">
  <div class="fw-page" id="fw-section-toc">
    <span class="toc-label">ÍNDICE DE CONTENIDOS</span> FWMARK-TOC
    <ul>
      <li>INIT.SYS <span class="toc-pn" id="toc-pn-01"></span></li>
      <li>KERNEL <span class="toc-pn" data-section-id="02"></span></li>
    </ul>
  </div>
  <div class="fw-page" id="fw-section-01"><span class="section-id">INIT.SYS</span> FWMARK-01-INIT.SYS</div>
  <div class="fw-page" id="fw-section-02"><span class="section-id">KERNEL</span> FWMARK-02-KERNEL</div>
</body>
</html>
"""


@pytest.fixture
def sample_html() -> str:
    return SAMPLE_HTML


@pytest.fixture
def sample_document() -> SourceDocument:
    """示例源文档（目录含两个页码占位符）"""
    return SourceDocument.from_html(SAMPLE_HTML, locator="sample.html")


@pytest.fixture
def sample_html_path(temp_dir: Path) -> Path:
    path = temp_dir / "print.html"
    path.write_text(SAMPLE_HTML, encoding="utf-8")
    return path


# ============================================================================
# PDF / 渲染器 Fixtures
# ============================================================================

def build_pdf(page_texts: list[str], width: float = A5_WIDTH, height: float = A5_HEIGHT) -> bytes:
    """用PyMuPDF生成每页一段文本的PDF"""
    doc = fitz.open()
    for text in page_texts:
        page = doc.new_page(width=width, height=height)
        if text:
            page.insert_text(fitz.Point(50, 100), text, fontname="helv", fontsize=10)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_factory() -> Callable[..., bytes]:
    return build_pdf


class FakeRenderer(IRenderer):
    """
    假渲染器：按调用次数返回预置的逐页文本

    passes[i] 为第 i 次渲染的逐页文本；次数超出时重复最后一遍。
    """

    def __init__(self, passes: list[list[str]], fail_on: int | None = None):
        self.passes = passes
        self.fail_on = fail_on
        self.calls = 0
        self.rendered_html: list[str] = []

    def render(self, document: SourceDocument, layout: LayoutConfig) -> RenderedPages:
        from manual_press.interfaces import RenderError

        self.calls += 1
        self.rendered_html.append(document.html)
        if self.fail_on == self.calls:
            raise RenderError("navigation timeout")

        texts = self.passes[min(self.calls, len(self.passes)) - 1]
        return RenderedPages(pdf=build_pdf(texts), page_texts=list(texts))


@pytest.fixture
def fake_renderer() -> Callable[..., FakeRenderer]:
    return FakeRenderer


def scenario_pages(total: int = 10) -> list[str]:
    """目录在第1页，INIT.SYS 第3页，KERNEL 第7页"""
    texts = [f"page body {i}" for i in range(1, total + 1)]
    texts[0] = "ÍNDICE DE CONTENIDOS FWMARK-TOC"
    texts[2] = "INIT.SYS FWMARK-01-INIT.SYS\nsystem boot"
    texts[6] = "KERNEL FWMARK-02-KERNEL"
    return texts


@pytest.fixture
def scenario_texts() -> list[str]:
    return scenario_pages()


# ============================================================================
# 绘制记录 Fixtures
# ============================================================================

class RecordingPage(IPageSurface):
    """记录绘制操作的假页面（Courier字宽 0.6em）"""

    def __init__(self, width: float = A5_WIDTH, height: float = A5_HEIGHT):
        self._width = width
        self._height = height
        self.texts: list[tuple[str, float, float, float, RGB]] = []
        self.lines: list[tuple[tuple[float, float], tuple[float, float], float, RGB]] = []

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def text_width(self, text: str, font_size: float) -> float:
        return len(text) * font_size * 0.6

    def draw_text(self, text: str, x: float, y: float, font_size: float, color: RGB) -> None:
        self.texts.append((text, x, y, font_size, color))

    def draw_line(self, start, end, thickness, color) -> None:
        self.lines.append((start, end, thickness, color))

    def text_x(self, text: str) -> float:
        return next(x for t, x, *_ in self.texts if t == text)


class RecordingDocument(IPageDocument):
    def __init__(self, page_count: int):
        self._pages = [RecordingPage() for _ in range(page_count)]
        self.decorated = False

    def pages(self) -> Iterator[IPageSurface]:
        return iter(self._pages)

    def page_count(self) -> int:
        return len(self._pages)

    def to_bytes(self) -> bytes:
        return b""

    def __getitem__(self, page_no: int) -> RecordingPage:
        """按1起始页码取页"""
        return self._pages[page_no - 1]


@pytest.fixture
def recording_document() -> Callable[[int], RecordingDocument]:
    return RecordingDocument
