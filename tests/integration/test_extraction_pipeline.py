"""
Integration tests for the extraction pipeline from raw HTML to documents.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from chiselcore import ContentExtractor, ExtractionStage, Settings, extract
from chiselcore.observability.metrics import METRICS
from tests.helpers import BOILERPLATE, PARAGRAPH_ONE, PARAGRAPH_TWO, metric_delta

pytestmark = pytest.mark.integration


class TestExtractionPipeline:
    """End-to-end extraction of realistic pages."""

    def test_article_page(self, article_html):
        """Test that the article is kept and the page chrome dropped."""
        document = extract(article_html, url="https://example.org/flood")

        assert document.stage is ExtractionStage.MAIN
        assert document.text.startswith("Valley braces for new embankments")
        assert PARAGRAPH_ONE in document.text
        assert PARAGRAPH_TWO in document.text
        assert "First public meeting in the town hall next Tuesday evening" in document.text
        for chrome in ("Home", "Logo", "Copyright", "tracking"):
            assert chrome not in document.text
        assert document.body.find("list") is not None
        assert "Finally someone is doing something about the floods." in document.comments

    def test_boilerplate_deduplicated(self, boilerplate_page):
        """Test that a repeated paragraph is kept once with deduplication."""
        with metric_delta(METRICS["dedup_hits"], 2):
            document = extract(boilerplate_page(), dedup=True)

        assert document.text.count(BOILERPLATE) == 1
        assert PARAGRAPH_ONE in document.text
        assert PARAGRAPH_TWO in document.text
        assert "Home News Sports Weather Contact" not in document.text

    def test_boilerplate_kept_without_dedup(self, boilerplate_page):
        """Test that repetitions survive when deduplication is off."""
        document = extract(boilerplate_page())
        assert document.text.count(BOILERPLATE) == 3

    def test_frameless_boilerplate_kept_without_dedup(self):
        """Test that a page without a content frame keeps repeats when deduplication is off."""
        page = (
            f"<html><body><div><p>{BOILERPLATE}</p><p>{PARAGRAPH_ONE}</p><p>{BOILERPLATE}</p>"
            f"<p>{PARAGRAPH_TWO}</p><p>{BOILERPLATE}</p></div></body></html>"
        )
        document = extract(page)
        assert document.stage is ExtractionStage.MAIN
        assert document.text.count(BOILERPLATE) == 3

    def test_inline_markup_keeps_word_spacing(self):
        """Test that headings, quotes and cells with inline markup keep their spaces."""
        document = extract(
            f"<html><body><article><h2>Heading with <b>bold</b> words</h2><p>{PARAGRAPH_ONE}</p>"
            "<blockquote>He said <b>very</b> loudly that the plan works</blockquote>"
            "<table><tr><td>Price in <b>euro</b> per ton</td>"
            '<td>See <a href="/r">the report</a> today</td></tr></table>'
            f"<p>{PARAGRAPH_TWO}</p></article></body></html>",
            formatting=True,
            links=True,
        )
        lines = document.text.splitlines()
        assert lines[0] == "Heading with bold words"
        assert "He said very loudly that the plan works" in lines
        assert "Price in euro per ton" in document.text
        assert "See the report today" in document.text

    def test_table_page(self):
        """Test that tables come out as rows of cells with a header row."""
        document = extract(
            f"<html><body><article><p>{PARAGRAPH_ONE}</p>"
            "<table><tr><th>Village</th><th>Start</th></tr><tr><td>Lowbridge</td><td>May</td></tr></table>"
            f"<p>{PARAGRAPH_TWO}</p></article></body></html>"
        )
        table = document.body.find("table")
        assert [row.tag for row in table] == ["row", "row"]
        assert [cell.get("role") for cell in table[0]] == ["head", "head"]
        assert [cell.text for cell in table[1]] == ["Lowbridge", "May"]

    def test_tables_disabled(self):
        """Test that tables are dropped when disabled."""
        document = extract(
            f"<html><body><article><p>{PARAGRAPH_ONE}</p>"
            "<table><tr><td>Lowbridge</td><td>May</td></tr></table>"
            f"<p>{PARAGRAPH_TWO}</p></article></body></html>",
            tables=False,
        )
        assert document.body.find(".//table") is None
        assert "Lowbridge" not in document.text

    def test_code_page(self):
        """Test that preformatted code is kept as a code block."""
        document = extract(
            f"<html><body><article><p>{PARAGRAPH_ONE}</p>"
            "<pre>def main():\n    return 42</pre>"
            f"<p>{PARAGRAPH_TWO}</p></article></body></html>"
        )
        assert document.body.find("code") is not None
        assert "return 42" in document.text

    def test_fast_mode(self, article_html):
        """Test that fast mode goes straight to the baseline."""
        document = extract(article_html, fast=True)
        assert document.stage is ExtractionStage.BASELINE
        assert PARAGRAPH_ONE in document.text


class TestServiceFromSettings:
    """Service configured from a YAML file."""

    @pytest.mark.asyncio
    async def test_batch_from_yaml_settings(self, tmp_path: Path, article_html, short_html):
        """Test a batch run with settings loaded from disk."""
        path = tmp_path / "chisel.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "extraction": {"focus": "recall", "comments": False},
                    "service": {"max_concurrency": 2},
                }
            )
        )
        extractor = ContentExtractor.from_settings(Settings.from_yaml(path))

        documents = await extractor.extract_many(
            [(article_html, "https://example.org/a"), (short_html, None), (article_html, "https://example.org/b")]
        )

        assert [document is not None for document in documents] == [True, False, True]
        assert documents[0].comments == ""
        assert documents[2].url == "https://example.org/b"
        metrics = extractor.get_metrics()
        assert metrics["attempts"] == 3
        assert metrics["failures"] == 1
