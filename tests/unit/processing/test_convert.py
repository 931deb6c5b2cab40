"""
Unit tests for tag conversion into the extraction vocabulary.
"""

import pytest
from lxml import etree

from chiselcore.config import ExtractorConfig
from chiselcore.processing import convert_tags


def _convert(fragment: str, **options) -> etree._Element:
    return convert_tags(etree.fromstring(fragment), ExtractorConfig(**options))


class TestStructuralConversion:
    """Test block-level conversions."""

    def test_lists(self):
        """Test that lists become list/item with the source tag as rend."""
        tree = _convert("<div><ul><li>one</li><li>two</li></ul></div>")
        assert tree[0].tag == "list"
        assert tree[0].get("rend") == "ul"
        assert [item.tag for item in tree[0]] == ["item", "item"]

    def test_description_lists_numbered(self):
        """Test that dt/dd pairs are numbered."""
        tree = _convert("<div><dl><dt>a</dt><dd>b</dd><dt>c</dt><dd>d</dd></dl></div>")
        assert [item.get("rend") for item in tree[0]] == ["dt-1", "dd-1", "dt-2", "dd-2"]

    @pytest.mark.parametrize("level", range(1, 7))
    def test_headings(self, level):
        """Test that all heading levels become head with rend."""
        tree = _convert(f'<div><h{level} class="x">Title</h{level}></div>')
        assert tree[0].tag == "head"
        assert dict(tree[0].attrib) == {"rend": f"h{level}"}

    def test_line_breaks(self):
        """Test that br and hr become lb."""
        tree = _convert("<p>a<br/>b<hr/>c</p>")
        assert [child.tag for child in tree] == ["lb", "lb"]

    def test_quotes_and_code(self):
        """Test blockquote and pre conversion."""
        tree = _convert("<div><blockquote>Said</blockquote><pre>plain text</pre><pre>if (x) { y(); }</pre></div>")
        assert [child.tag for child in tree] == ["quote", "quote", "code"]

    def test_highlighted_pre_is_code(self):
        """Test that highlighter spans mark a pre as code."""
        tree = _convert('<div><pre><span class="hljs-keyword">def</span> f</pre></div>')
        assert tree[0].tag == "code"
        assert dict(tree[0][0].attrib) == {}

    def test_deletions(self):
        """Test del/s/strike conversion."""
        tree = _convert("<p><del>a</del><s>b</s><strike>c</strike></p>")
        assert all(child.tag == "del" and child.get("rend") == "overstrike" for child in tree)

    def test_details(self):
        """Test details/summary conversion."""
        tree = _convert("<div><details><summary>More</summary>hidden text</details></div>")
        assert tree[0].tag == "div"
        assert tree[0][0].tag == "head"


class TestInlineConversion:
    """Test formatting, links and images."""

    def test_formatting_kept(self):
        """Test that inline formatting becomes hi with rend."""
        tree = _convert("<p><b>bold</b> <em>it</em> <sub>2</sub></p>", formatting=True)
        assert [(child.tag, child.get("rend")) for child in tree] == [("hi", "#b"), ("hi", "#i"), ("hi", "#sub")]

    def test_formatting_stripped(self):
        """Test that inline formatting is unwrapped when off."""
        tree = _convert("<p>a <b>bold</b> word</p>")
        assert len(tree) == 0
        assert tree.text == "a bold word"

    def test_links_off_keeps_refs_for_density(self):
        """Test that anchors in text containers become bare refs."""
        tree = _convert('<div><p>see <a href="/x">this</a></p><a href="/y">loose</a></div>')
        assert tree.find(".//p/ref") is not None
        assert tree.find(".//p/ref").get("href") == "/x"
        assert tree.find("a") is None

    def test_links_on_resolves_targets(self):
        """Test that anchors become refs with resolved targets."""
        tree = _convert('<p><a href="/page" class="c">text</a></p>', links=True, url="https://example.org/dir/")
        ref = tree.find("ref")
        assert dict(ref.attrib) == {"target": "https://example.org/page"}

    def test_images(self):
        """Test that img becomes graphic when images are on."""
        tree = _convert('<p><img src="a.png"/></p>', images=True)
        assert tree[0].tag == "graphic"
