"""
Unit tests for tree cleaning and boilerplate pruning.
"""

from lxml import etree, html

from chiselcore.config import ExtractorConfig
from chiselcore.processing import prune_html, prune_unwanted_nodes, prune_unwanted_sections, tree_cleaning
from chiselcore.processing.xpaths import OVERALL_DISCARD_XPATH
from chiselcore.utils.tree import text_content


def _tree(markup: str) -> etree._Element:
    return html.document_fromstring(markup)


class TestTreeCleaning:
    """Test denylist removal and tag stripping."""

    def test_denylisted_elements_removed(self):
        """Test that scripts, navigation and footers disappear with their content."""
        tree = _tree(
            "<html><body><nav>Menu</nav><script>x()</script><p>Kept text</p><footer>Foot</footer></body></html>"
        )
        cleaned = tree_cleaning(tree, ExtractorConfig())
        text = text_content(cleaned)
        assert "Kept text" in text
        assert "Menu" not in text
        assert "x()" not in text
        assert "Foot" not in text

    def test_tail_kept_unless_precision(self):
        """Test that the tail of a removed element survives outside precision focus."""
        markup = "<html><body><div><p>Start</p><aside>Side</aside>tail words</div></body></html>"
        assert "tail words" in text_content(tree_cleaning(_tree(markup), ExtractorConfig()))
        assert "tail words" not in text_content(tree_cleaning(_tree(markup), ExtractorConfig(focus="precision")))

    def test_transparent_tags_stripped(self):
        """Test that wrapper tags are unwrapped with their text kept in place."""
        tree = _tree("<html><body><p>An <abbr>HTML</abbr> page in <font>red</font> ink</p></body></html>")
        cleaned = tree_cleaning(tree, ExtractorConfig())
        paragraph = cleaned.find(".//p")
        assert len(paragraph) == 0
        assert paragraph.text == "An HTML page in red ink"

    def test_tables_removed_when_disabled(self):
        """Test that tables are dropped when tables are off."""
        tree = _tree("<html><body><table><tr><td>cell</td></tr></table><p>text</p></body></html>")
        cleaned = tree_cleaning(tree, ExtractorConfig(tables=False))
        assert cleaned.find(".//table") is None

    def test_figure_with_table_kept(self):
        """Test that a figure wrapping a table becomes a div."""
        tree = _tree("<html><body><figure><table><tr><td>cell</td></tr></table></figure></body></html>")
        cleaned = tree_cleaning(tree, ExtractorConfig())
        assert cleaned.find(".//div/table") is not None

    def test_images_preserved(self):
        """Test that figures and images survive when images are on."""
        tree = _tree('<html><body><figure><img src="a.png"/></figure></body></html>')
        cleaned = tree_cleaning(tree, ExtractorConfig(images=True))
        assert cleaned.find(".//figure/img") is not None
        stripped = tree_cleaning(_tree('<html><body><p><img src="a.png"/>x</p></body></html>'), ExtractorConfig())
        assert stripped.find(".//img") is None

    def test_recall_guard_restores_paragraphs(self):
        """Test that recall focus rolls back a cleaning that removes every paragraph."""
        tree = _tree("<html><body><form><p>Only paragraph inside a form</p></form></body></html>")
        cleaned = tree_cleaning(tree, ExtractorConfig(focus="recall"))
        assert cleaned.find(".//p") is not None
        balanced = tree_cleaning(
            _tree("<html><body><form><p>Only paragraph inside a form</p></form></body></html>"), ExtractorConfig()
        )
        assert balanced.find(".//p") is None


class TestPruneHtml:
    """Test removal of empty wrappers."""

    def test_empty_wrappers_removed(self):
        """Test that empty divs and spans go while tails stay."""
        tree = _tree("<html><body><div><span></span>after</div><p>text</p></body></html>")
        pruned = prune_html(tree, ExtractorConfig())
        assert pruned.find(".//span") is None
        assert "after" in text_content(pruned)


class TestPruneUnwantedNodes:
    """Test selector-based pruning."""

    def test_backup_restores_when_too_much_removed(self):
        """Test that the backup is returned when almost all text would go."""
        tree = etree.fromstring('<div><div class="sidebar">' + "word " * 50 + "</div><p>tiny</p></div>")
        result = prune_unwanted_nodes(tree, OVERALL_DISCARD_XPATH, with_backup=True)
        assert "word" in text_content(result)

    def test_nodes_removed_without_backup(self):
        """Test that matching nodes are removed and tails kept."""
        tree = etree.fromstring('<div><div class="sidebar">side</div>tail<p>body text</p></div>')
        result = prune_unwanted_nodes(tree, OVERALL_DISCARD_XPATH)
        assert "side" not in text_content(result)
        assert "tail" in text_content(result)


class TestPruneUnwantedSections:
    """Test pruning within a candidate content subtree."""

    def test_share_and_teaser_blocks_removed(self):
        """Test that sharing and teaser blocks are discarded."""
        content = "Body text that should stay in the article. " * 5
        tree = etree.fromstring(
            f'<article><p>{content}</p><div class="share-buttons">Share this</div>'
            f'<div class="teaser">Another story</div></article>'
        )
        pruned = prune_unwanted_sections(tree, {"p", "div"}, ExtractorConfig())
        text = text_content(pruned)
        assert "Share this" not in text
        assert "Another story" not in text
        assert "Body text" in text

    def test_teasers_kept_in_recall(self):
        """Test that recall focus keeps teasers."""
        content = "Body text that should stay in the article. " * 5
        tree = etree.fromstring(f'<article><p>{content}</p><div class="teaser">Another story</div></article>')
        pruned = prune_unwanted_sections(tree, {"p", "div"}, ExtractorConfig(focus="recall"))
        assert "Another story" in text_content(pruned)

    def test_trailing_headings_dropped_in_precision(self):
        """Test that headings at the end are removed in precision focus."""
        content = "Body text that should stay in the article. " * 5
        tree = etree.fromstring(f"<article><p>{content}</p><head>Related</head></article>")
        pruned = prune_unwanted_sections(tree, {"p"}, ExtractorConfig(focus="precision"))
        assert pruned.find("head") is None
