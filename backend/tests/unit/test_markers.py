"""
章节标记提取单元测试
"""

import pytest

from manual_press.layout import MarkerExtractor, format_marker


class TestMarkerExtractor:
    """标记提取器测试"""

    @pytest.fixture
    def extractor(self) -> MarkerExtractor:
        return MarkerExtractor()

    def test_scenario_map(self, extractor: MarkerExtractor, scenario_texts):
        """测试目录/INIT.SYS/KERNEL 三节文档"""
        smap = extractor.extract(scenario_texts)

        assert [(m.id, m.label, m.start_page) for m in smap] == [
            ("TOC", "ÍNDICE DE CONTENIDOS", 1),
            ("01", "INIT.SYS", 3),
            ("02", "KERNEL", 7),
        ]
        assert smap.label_for_page(1) == "ÍNDICE DE CONTENIDOS"
        assert smap.label_for_page(2) == "ÍNDICE DE CONTENIDOS"
        assert smap.label_for_page(5) == "INIT.SYS"
        assert smap.label_for_page(10) == "KERNEL"

    def test_extract_multiple_per_page(self, extractor: MarkerExtractor):
        """测试同页多个标记保持发现顺序"""
        smap = extractor.extract([
            "cover",
            "FWMARK-01-BOOT short FWMARK-02-NET\nFWMARK-03-IO",
        ])
        assert [(m.id, m.start_page) for m in smap] == [("01", 2), ("02", 2), ("03", 2)]

    def test_extract_label_fallback(self, extractor: MarkerExtractor):
        """测试无显式标签时：目录id→目录标题，其余→id"""
        smap = extractor.extract(["FWMARK-TOC FWMARK-intro"])
        assert [m.label for m in smap] == ["ÍNDICE DE CONTENIDOS", "intro"]

    def test_custom_toc_title(self):
        extractor = MarkerExtractor(toc_id="IDX", toc_title="CONTENTS")
        smap = extractor.extract(["FWMARK-IDX FWMARK-TOC"])
        assert [m.label for m in smap] == ["CONTENTS", "TOC"]

    def test_label_charset(self, extractor: MarkerExtractor):
        """测试标签允许大写/数字/点/下划线"""
        smap = extractor.extract(["FWMARK-07-NET_STACK.V2"])
        assert smap.markers[0].label == "NET_STACK.V2"

    @pytest.mark.parametrize(
        "text",
        [
            "FWMARK-",
            "FWMARK- orphan",
            "FWMARK-01-init",
            "FWMARK-01-Init.SYS",
            "FWMARK--LABEL",
            "FWMARK-01-INIT,more",
        ],
    )
    def test_malformed_tokens_ignored(self, extractor: MarkerExtractor, text):
        """测试非法标记不产生条目"""
        assert len(extractor.extract([text])) == 0

    def test_token_at_end_of_text(self, extractor: MarkerExtractor):
        """测试标记位于文本末尾"""
        smap = extractor.extract(["", "", "see FWMARK-09-END"])
        assert smap.start_page_for_id("09") == 3

    def test_empty_document(self, extractor: MarkerExtractor):
        """测试无标记时为空映射"""
        smap = extractor.extract(["cover page", "", "body text"])
        assert len(smap) == 0
        assert smap.label_for_page(2) is None

    def test_format_marker_roundtrip(self, extractor: MarkerExtractor):
        text = f"{format_marker('01', 'INIT.SYS')} {format_marker('TOC')}"
        smap = extractor.extract([text])
        assert [(m.id, m.label) for m in smap] == [
            ("01", "INIT.SYS"),
            ("TOC", "ÍNDICE DE CONTENIDOS"),
        ]
