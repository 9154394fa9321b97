"""
两遍分页驱动单元测试
"""

import logging

import pytest

from manual_press.interfaces import RenderError
from manual_press.layout import MarkerExtractor, PaginationDriver, SourceDocument


class TestPaginationDriver:
    """分页驱动测试"""

    def test_paginate_two_passes(self, fake_renderer, layout, sample_document, scenario_texts):
        """测试两遍渲染与结果组装"""
        renderer = fake_renderer([scenario_texts])
        driver = PaginationDriver(renderer, layout)

        result = driver.paginate(sample_document)

        assert renderer.calls == 2
        assert result.first_page_count == 10
        assert result.final_page_count == 10
        assert not result.drifted
        assert [m.start_page for m in result.section_map] == [1, 3, 7]

    def test_paginate_injects_page_numbers(self, fake_renderer, layout, sample_document, scenario_texts):
        """测试第二遍渲染的是已注入页码的源文档"""
        renderer = fake_renderer([scenario_texts])
        driver = PaginationDriver(renderer, layout)

        result = driver.paginate(sample_document)

        assert result.injected == {"01": 3, "02": 7}
        first_html, second_html = renderer.rendered_html
        second = SourceDocument.from_html(second_html)
        assert second.soup.find(id="toc-pn-01").get_text() == "3"
        assert second.soup.find(attrs={"data-section-id": "02"}).get_text() == "7"
        # 第一遍时占位符仍为空
        first = SourceDocument.from_html(first_html)
        assert first.soup.find(id="toc-pn-01").get_text() == ""

    def test_paginate_skips_toc_marker(self, fake_renderer, layout, scenario_texts):
        """测试目录标记自身不注入"""
        doc = SourceDocument.from_html(
            '<body data-pdf-ready><span id="toc-pn-TOC">?</span>'
            '<span id="toc-pn-01"></span></body>'
        )
        driver = PaginationDriver(fake_renderer([scenario_texts]), layout)

        result = driver.paginate(doc)

        assert "TOC" not in result.injected
        assert doc.soup.find(id="toc-pn-TOC").get_text() == "?"

    def test_paginate_drift_warning(self, fake_renderer, layout, sample_document, scenario_texts, caplog):
        """测试页数漂移：仅告警，沿用第一遍映射与第二遍页面"""
        second_pass = scenario_texts + ["overflow"]
        renderer = fake_renderer([scenario_texts, second_pass])
        driver = PaginationDriver(renderer, layout)

        with caplog.at_level(logging.WARNING):
            result = driver.paginate(sample_document)

        assert result.drifted
        assert (result.first_page_count, result.final_page_count) == (10, 11)
        assert result.pages.page_texts[-1] == "overflow"
        assert result.section_map.start_page_for_id("02") == 7
        assert any("10 → 11" in r.getMessage() for r in caplog.records)

    @pytest.mark.parametrize("fail_on", [1, 2])
    def test_paginate_render_failure(self, fake_renderer, layout, sample_document, scenario_texts, fail_on):
        """测试任一遍渲染失败即中止"""
        renderer = fake_renderer([scenario_texts], fail_on=fail_on)
        driver = PaginationDriver(renderer, layout)

        with pytest.raises(RenderError):
            driver.paginate(sample_document)
        assert renderer.calls == fail_on

    def test_paginate_without_markers(self, fake_renderer, layout, sample_document):
        """测试无标记文档：空映射，不注入"""
        driver = PaginationDriver(fake_renderer([["cover", "body"]]), layout)
        result = driver.paginate(sample_document)

        assert len(result.section_map) == 0
        assert result.injected == {}

    def test_stage_callback(self, fake_renderer, layout, sample_document, scenario_texts):
        stages = []
        driver = PaginationDriver(fake_renderer([scenario_texts]), layout, MarkerExtractor())
        driver.paginate(sample_document, on_stage=stages.append)
        assert stages == ["RENDER_1", "EXTRACT", "INJECT", "RENDER_2", "VERIFY"]
