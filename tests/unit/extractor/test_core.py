"""
Unit tests for the extraction orchestrator and its fallback chain.
"""

from typing import List

import pytest
from lxml import etree

from chiselcore.config import ExtractorConfig
from chiselcore.dedup import fingerprint
from chiselcore.exceptions import ConfigError, ParseError
from chiselcore.extractor import core
from chiselcore.extractor.core import bare_extraction, extract, resolve_config
from chiselcore.extractor.models import DocumentMetadata, ExtractionResult, ExtractionStage
from chiselcore.observability.metrics import METRICS
from tests.helpers import PARAGRAPH_ONE, histogram_observes, metric_delta

PAGE = "<html><body><div><p>Some page text.</p></div></body></html>"


def _result(length: int) -> ExtractionResult:
    body = etree.Element("body")
    etree.SubElement(body, "p").text = "x" * length
    return ExtractionResult.from_body(body)


@pytest.fixture
def stages(monkeypatch):
    """Replace every stage with a stub returning text of a chosen length."""
    calls: List[str] = []
    lengths = {"main": 0, "baseline": 0, "smart_baseline": 0}

    def _stub(name):
        def _stage(*args, **kwargs):
            calls.append(name)
            return _result(lengths[name])

        return _stage

    monkeypatch.setattr(core, "extract_content", _stub("main"))
    monkeypatch.setattr(core, "baseline", _stub("baseline"))
    monkeypatch.setattr(core, "smart_baseline", _stub("smart_baseline"))
    return lengths, calls


class TestFallbackChain:
    """Test stage ordering and acceptance."""

    def test_main_accepted(self, stages, parse_html):
        """Test that a long main result stops the chain."""
        lengths, calls = stages
        lengths["main"] = 250
        document = bare_extraction(parse_html(PAGE))
        assert document.stage is ExtractionStage.MAIN
        assert calls == ["main"]

    def test_baseline_after_short_main(self, stages, parse_html):
        """Test that the baseline runs when the main result is short."""
        lengths, calls = stages
        lengths.update(main=50, baseline=300)
        document = bare_extraction(parse_html(PAGE))
        assert document.stage is ExtractionStage.BASELINE
        assert calls == ["main", "baseline"]

    def test_smart_baseline_last(self, stages, parse_html):
        """Test that the smart baseline runs when both earlier stages are short."""
        lengths, calls = stages
        lengths.update(main=50, baseline=60, smart_baseline=220)
        document = bare_extraction(parse_html(PAGE))
        assert document.stage is ExtractionStage.SMART_BASELINE
        assert document.length == 220
        assert calls == ["main", "baseline", "smart_baseline"]

    def test_all_short_fails(self, stages, parse_html):
        """Test that no document is returned when every stage is short."""
        lengths, calls = stages
        lengths.update(main=50, baseline=60, smart_baseline=70)
        with metric_delta(METRICS["extraction_failures"]):
            assert bare_extraction(parse_html(PAGE)) is None
        assert calls == ["main", "baseline", "smart_baseline"]

    def test_precision_accepts_short_main(self, stages, parse_html):
        """Test that precision focus never falls back."""
        lengths, calls = stages
        lengths["main"] = 50
        document = bare_extraction(parse_html(PAGE), ExtractorConfig(focus="precision"))
        assert document.stage is ExtractionStage.MAIN
        assert calls == ["main"]

    def test_min_output_size(self, stages, parse_html):
        """Test that results under the absolute minimum fail even when accepted."""
        lengths, _ = stages
        lengths["main"] = 5
        config = ExtractorConfig(focus="precision", min_output_size=10)
        assert bare_extraction(parse_html(PAGE), config) is None

    def test_no_fallback(self, stages, parse_html):
        """Test that disabling fallbacks fails on a short main result."""
        lengths, calls = stages
        lengths.update(main=50, baseline=500, smart_baseline=500)
        assert bare_extraction(parse_html(PAGE), ExtractorConfig(no_fallback=True)) is None
        assert calls == ["main"]

    def test_fast_mode(self, stages, parse_html):
        """Test that fast mode skips the main pass."""
        lengths, calls = stages
        lengths["baseline"] = 300
        document = bare_extraction(parse_html(PAGE), ExtractorConfig(fast=True))
        assert document.stage is ExtractionStage.BASELINE
        assert calls == ["baseline"]

    def test_fast_mode_smart_baseline(self, stages, parse_html):
        """Test that fast mode still tries the smart baseline."""
        lengths, calls = stages
        lengths.update(baseline=30, smart_baseline=300)
        document = bare_extraction(parse_html(PAGE), ExtractorConfig(fast=True))
        assert document.stage is ExtractionStage.SMART_BASELINE
        assert calls == ["baseline", "smart_baseline"]

    def test_metrics(self, stages, parse_html):
        """Test the per-stage counter and the duration histogram."""
        lengths, _ = stages
        lengths["main"] = 250
        with metric_delta(METRICS["extractions"].labels(stage="main")):
            with histogram_observes(METRICS["extraction_duration"]):
                bare_extraction(parse_html(PAGE))


class TestBareExtraction:
    """Test document assembly on real pages."""

    def test_document_fields(self, article_html, parse_html):
        """Test body, comments, metadata and fingerprint."""
        document = bare_extraction(parse_html(article_html), ExtractorConfig(url="https://example.org/flood"))

        assert document.stage is ExtractionStage.MAIN
        assert PARAGRAPH_ONE in document.text
        assert "Great news for everyone" in document.comments
        assert "Great news for everyone" not in document.text
        assert document.commentsbody.tag == "body"
        assert document.url == "https://example.org/flood"
        assert document.fingerprint == fingerprint(document.text)

    def test_comments_disabled(self, article_html, parse_html):
        """Test that comments are left out when disabled."""
        document = bare_extraction(parse_html(article_html), ExtractorConfig(comments=False))
        assert document.commentsbody is None
        assert document.comments == ""

    def test_metadata_passed_through(self, article_html, parse_html):
        """Test that supplied metadata is attached unchanged."""
        metadata = DocumentMetadata(title="Flood report", author="Valley Times")
        document = bare_extraction(parse_html(article_html), metadata=metadata)
        assert document.metadata is metadata
        assert document.title == "Flood report"

    def test_input_tree_untouched(self, article_html, parse_html):
        """Test that extraction works on a copy."""
        tree = parse_html(article_html)
        before = etree.tostring(tree)
        bare_extraction(tree)
        assert etree.tostring(tree) == before


class TestExtract:
    """Test the string entry point."""

    def test_keyword_overrides(self, article_html):
        """Test that options can be passed as keywords."""
        document = extract(article_html, comments=False, url="https://example.org/")
        assert document.comments == ""
        assert document.url == "https://example.org/"

    @pytest.mark.parametrize("markup", [None, "", "   "])
    def test_empty_input(self, markup):
        """Test that empty input returns None."""
        assert extract(markup) is None

    def test_empty_input_raises(self):
        """Test that empty input raises on request."""
        with pytest.raises(ParseError):
            extract("", raise_on_error=True)

    def test_short_page(self, short_html):
        """Test that a page too short for every stage yields nothing."""
        with metric_delta(METRICS["extraction_failures"]):
            assert extract(short_html) is None


class TestResolveConfig:
    """Test option merging."""

    def test_no_overrides(self):
        """Test that the configuration is returned as is."""
        config = ExtractorConfig(focus="recall")
        assert resolve_config(config) is config

    def test_overrides_merged(self):
        """Test that overrides replace single options."""
        config = resolve_config(ExtractorConfig(focus="recall"), images=True)
        assert (config.focus, config.images) == ("recall", True)

    def test_unknown_option(self):
        """Test that unknown options raise ConfigError."""
        with pytest.raises(ConfigError, match="include_everything"):
            resolve_config(include_everything=True)

    def test_invalid_value(self):
        """Test that invalid values raise ConfigError."""
        with pytest.raises(ConfigError):
            resolve_config(focus="speed")
