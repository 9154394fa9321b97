"""
源文档 - 加载打印视图HTML并提供目录页码占位符写入

职责：
1. 从URL（requests）或本地文件加载HTML
2. 校验就绪信号（默认 body[data-pdf-ready]），缺失即渲染失败
3. 按章节id定位目录页码占位符并写入页码（修改的是源文档，不是渲染结果）

占位符协议：
- <span id="toc-pn-{id}"></span>
- <span class="toc-pn" data-section-id="{id}"></span>

测试要点：
- test_set_page_number_by_id: id占位符写入
- test_set_page_number_by_data_attr: data属性占位符写入
- test_load_missing_ready_signal: 就绪信号缺失
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests
from bs4 import BeautifulSoup, Tag

from ..interfaces import RenderError

logger = logging.getLogger(__name__)

PLACEHOLDER_ID_PREFIX = "toc-pn-"
PLACEHOLDER_CLASS = "toc-pn"
DEFAULT_READY_SELECTOR = "body[data-pdf-ready]"


class SourceDocument:
    """可修改的源文档（解析后的HTML树）"""

    def __init__(self, soup: BeautifulSoup, base_url: str | None = None, locator: str = ""):
        self.soup = soup
        self.base_url = base_url
        self.locator = locator

    @classmethod
    def from_html(
        cls, html: str, base_url: str | None = None, locator: str = ""
    ) -> SourceDocument:
        return cls(BeautifulSoup(html, "html.parser"), base_url=base_url, locator=locator)

    @property
    def html(self) -> str:
        return str(self.soup)

    def is_ready(self, selector: str = DEFAULT_READY_SELECTOR) -> bool:
        return self.soup.select_one(selector) is not None

    def placeholders(self, section_id: str) -> list[Tag]:
        """按章节id查找页码占位符"""
        found: list[Tag] = []
        by_id = self.soup.find(id=f"{PLACEHOLDER_ID_PREFIX}{section_id}")
        if isinstance(by_id, Tag):
            found.append(by_id)
        for tag in self.soup.find_all(class_=PLACEHOLDER_CLASS, attrs={"data-section-id": section_id}):
            # Tag.__eq__ 比较结构，去重须按对象身份
            if not any(tag is t for t in found):
                found.append(tag)
        return found

    def set_page_number(self, section_id: str, page: int) -> bool:
        """写入页码，返回是否找到占位符"""
        tags = self.placeholders(section_id)
        for tag in tags:
            tag.string = str(page)
        if not tags:
            logger.debug(f"目录中无章节占位符: {section_id}")
        return bool(tags)


class SourceLoader:
    """源文档加载器"""

    def __init__(self, timeout: float = 60, ready_selector: str = DEFAULT_READY_SELECTOR):
        self.timeout = timeout
        self.ready_selector = ready_selector

    def load(self, locator: str) -> SourceDocument:
        """加载源文档并校验就绪信号"""
        if locator.startswith(("http://", "https://")):
            html, base_url = self._fetch(locator)
        else:
            html, base_url = self._read_file(Path(locator))

        document = SourceDocument.from_html(html, base_url=base_url, locator=locator)
        if not document.is_ready(self.ready_selector):
            raise RenderError(f"源文档未就绪（缺少 {self.ready_selector}）: {locator}")

        logger.info(f"源文档已加载: {locator}")
        return document

    def _fetch(self, url: str) -> tuple[str, str]:
        try:
            resp = requests.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.Timeout as e:
            raise RenderError(f"源文档加载超时({self.timeout}s): {url}") from e
        except requests.RequestException as e:
            raise RenderError(f"源文档加载失败: {url}: {e}") from e
        return resp.text, resp.url

    def _read_file(self, path: Path) -> tuple[str, str]:
        if not path.exists():
            raise RenderError(f"源文档不存在: {path}")
        base_url = path.resolve().parent.as_uri() + "/"
        return path.read_text(encoding="utf-8"), base_url
