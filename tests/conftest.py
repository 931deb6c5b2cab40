"""
Test configuration for ChiselCore.

Provides markers, shared HTML pages and helpers for building small trees.
"""

from typing import Callable, Generator

import pytest
from lxml import etree, html

from chiselcore.config import ExtractorConfig
from chiselcore.dedup import reset_shared_cache
from chiselcore.extractor.context import ExtractionContext
from tests.helpers.pages import BOILERPLATE, PARAGRAPH_ONE, PARAGRAPH_TWO

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")
    config.addinivalue_line("markers", "slow: Tests that take >10 seconds")


# ============================================================================
# Sample pages
# ============================================================================


@pytest.fixture
def article_html() -> str:
    """A typical news page with navigation, an article and a comment section."""
    return f"""
    <html>
    <head><title>Flood report</title><style>p {{ color: red; }}</style></head>
    <body>
        <nav><ul><li><a href="/">Home</a></li><li><a href="/news">News</a></li></ul></nav>
        <header><a href="/">Logo</a></header>
        <article>
            <h1>Valley braces for new embankments</h1>
            <p>{PARAGRAPH_ONE}</p>
            <p>{PARAGRAPH_TWO}</p>
            <ul>
                <li>First public meeting in the town hall next Tuesday evening</li>
                <li>Second meeting at the community centre on Thursday</li>
            </ul>
        </article>
        <div class="comments">
            <p>Great news for everyone living near the river bank.</p>
            <p>Finally someone is doing something about the floods.</p>
        </div>
        <footer><p>Copyright 2024 Valley Times</p></footer>
        <script>var tracking = true;</script>
    </body>
    </html>
    """


@pytest.fixture
def boilerplate_page() -> Callable[[], str]:
    """Page with a nav, a boilerplate paragraph repeated three times and two unique paragraphs."""

    def _build() -> str:
        return f"""
        <html><body>
            <nav><p>Home News Sports Weather Contact</p></nav>
            <article>
                <p>{BOILERPLATE}</p>
                <p>{PARAGRAPH_ONE}</p>
                <p>{BOILERPLATE}</p>
                <p>{PARAGRAPH_TWO}</p>
                <p>{BOILERPLATE}</p>
            </article>
        </body></html>
        """

    return _build


@pytest.fixture
def short_html() -> str:
    """A page with too little text for any stage."""
    return "<html><body><div><p>Too short.</p></div></body></html>"


# ============================================================================
# Tree helpers
# ============================================================================


@pytest.fixture
def make_element() -> Callable[[str], etree._Element]:
    """Parse an XML fragment into an element."""

    def _make(fragment: str) -> etree._Element:
        return etree.fromstring(fragment)

    return _make


@pytest.fixture
def parse_html() -> Callable[[str], etree._Element]:
    """Parse an HTML document the way the extractor does."""

    def _parse(markup: str) -> etree._Element:
        return html.document_fromstring(markup)

    return _parse


@pytest.fixture
def ctx() -> ExtractionContext:
    """Extraction context with default options."""
    return ExtractionContext(config=ExtractorConfig())


@pytest.fixture
def make_ctx() -> Callable[..., ExtractionContext]:
    """Build an extraction context from option overrides."""

    def _make(**options) -> ExtractionContext:
        return ExtractionContext(config=ExtractorConfig(**options))

    return _make


@pytest.fixture
def isolated_shared_cache() -> Generator[None, None, None]:
    """Drop the process-wide dedup cache around each test."""
    reset_shared_cache()
    yield
    reset_shared_cache()
