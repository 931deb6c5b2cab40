"""
Rewrite HTML tags into the internal extraction vocabulary.

After conversion lists are ``list``/``item``, headings ``head``, line breaks
``lb``, quotations ``quote``, code ``code``, deletions ``del``, inline
formatting ``hi``, anchors ``ref`` and images ``graphic``.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional
from urllib.parse import urljoin

from lxml.etree import _Element, strip_tags

from ..config.config import ExtractorConfig
from ..constants import CODE_INDICATORS, REND_TAG_MAPPING


def convert_link(element: _Element, base_url: Optional[str]) -> None:
    """Turn an anchor into a ref, keeping only a resolved target."""
    element.tag = "ref"
    target = element.get("href")
    element.attrib.clear()
    if target:
        if base_url:
            target = urljoin(base_url, target)
        element.set("target", target)


def convert_lists(element: _Element) -> None:
    element.set("rend", element.tag)
    element.tag = "list"
    counter = 1
    for item in list(element.iter("dd", "dt", "li")):
        # description lists number their term/definition pairs
        if item.tag in ("dd", "dt"):
            item.set("rend", f"{item.tag}-{counter}")
            if item.tag == "dd":
                counter += 1
        item.tag = "item"


def _is_code_block(text: Optional[str]) -> bool:
    return bool(text) and any(indicator in text for indicator in CODE_INDICATORS)  # type: ignore[operator]


def convert_quotes(element: _Element) -> None:
    code_flag = False
    if element.tag == "pre":
        children = list(element)
        if len(children) == 1 and children[0].tag == "span":
            code_flag = True
        highlighted = element.xpath(".//span[starts-with(@class,'hljs')]")
        if highlighted:
            code_flag = True
            for span in highlighted:
                span.attrib.clear()
        if _is_code_block(element.text):
            code_flag = True
    element.tag = "code" if code_flag else "quote"


def convert_headings(element: _Element) -> None:
    element.attrib.clear()
    element.set("rend", element.tag)
    element.tag = "head"


def convert_line_breaks(element: _Element) -> None:
    element.tag = "lb"


def convert_deletions(element: _Element) -> None:
    element.tag = "del"
    element.set("rend", "overstrike")


def convert_details(element: _Element) -> None:
    element.tag = "div"
    for summary in element.iter("summary"):
        summary.tag = "head"


CONVERSIONS: Dict[str, Callable[[_Element], None]] = {
    **{tag: convert_lists for tag in ("dl", "ol", "ul")},
    **{tag: convert_headings for tag in ("h1", "h2", "h3", "h4", "h5", "h6")},
    "br": convert_line_breaks,
    "hr": convert_line_breaks,
    "blockquote": convert_quotes,
    "pre": convert_quotes,
    "q": convert_quotes,
    "del": convert_deletions,
    "s": convert_deletions,
    "strike": convert_deletions,
    "details": convert_details,
}


def convert_tags(tree: _Element, config: ExtractorConfig) -> _Element:
    """Convert the relevant HTML tags in place and return the tree."""
    if not config.links:
        # anchors in text containers are kept for the link-density tests
        expression = ".//*[self::div or self::li or self::p]//a"
        if config.tables:
            expression += "|.//table//a"
        for element in tree.xpath(expression):
            element.tag = "ref"
        strip_tags(tree, "a")
    else:
        for element in list(tree.iter("a", "ref")):
            convert_link(element, config.url)

    if config.formatting:
        for element in list(tree.iter(*REND_TAG_MAPPING)):
            element.attrib.clear()
            element.set("rend", REND_TAG_MAPPING[element.tag])
            element.tag = "hi"
    else:
        strip_tags(tree, *REND_TAG_MAPPING)

    for element in list(tree.iter(*CONVERSIONS)):
        # nested conversions may have renamed the element already
        converter = CONVERSIONS.get(element.tag)
        if converter is not None:
            converter(element)

    if config.images:
        for element in list(tree.iter("img")):
            element.tag = "graphic"
    return tree
