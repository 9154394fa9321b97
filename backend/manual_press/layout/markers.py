"""
章节标记提取 - 扫描渲染文本中的 FWMARK 标记

标记格式（正文锚点输出的文本）：
    FWMARK-{id}[-{LABEL}]
- id: 字母数字，必需
- LABEL: 大写字母/数字/点/下划线，可选
- 以空白或字符串结尾终止；不合法的标记（小写标签、缺id）不匹配

标签解析顺序：显式LABEL → 目录标记id对应的目录标题 → id本身

测试要点：
- test_extract_multiple_per_page: 同页多个标记
- test_extract_label_fallback: 标签兜底
- test_malformed_tokens_ignored: 非法标记忽略
- test_empty_document: 无标记时空映射
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from ..models import SectionMap, SectionMarker

logger = logging.getLogger(__name__)

MARKER_RE = re.compile(r"FWMARK-([A-Za-z0-9]+)(?:-([A-Z0-9._]+))?(?=\s|$)")

DEFAULT_TOC_ID = "TOC"
DEFAULT_TOC_TITLE = "ÍNDICE DE CONTENIDOS"


def format_marker(section_id: str, label: str | None = None) -> str:
    """生成标记文本（源文档锚点使用）"""
    return f"FWMARK-{section_id}-{label}" if label else f"FWMARK-{section_id}"


class MarkerExtractor:
    """标记提取器"""

    def __init__(self, toc_id: str = DEFAULT_TOC_ID, toc_title: str = DEFAULT_TOC_TITLE):
        self.toc_id = toc_id
        self.toc_title = toc_title

    def extract(self, page_texts: Iterable[str]) -> SectionMap:
        """逐页扫描，页码从1开始"""
        markers: list[SectionMarker] = []
        for page_no, text in enumerate(page_texts, start=1):
            for m in MARKER_RE.finditer(text or ""):
                section_id, label = m.group(1), m.group(2)
                markers.append(
                    SectionMarker(
                        id=section_id,
                        label=self._resolve_label(section_id, label),
                        start_page=page_no,
                    )
                )

        section_map = SectionMap(markers)
        logger.info(f"发现章节标记 {len(section_map)} 个: {section_map!r}")
        return section_map

    def _resolve_label(self, section_id: str, label: str | None) -> str:
        if label:
            return label
        if section_id == self.toc_id:
            return self.toc_title
        return section_id
