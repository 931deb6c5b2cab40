"""
Fallback extractors used when the main pass finds too little text.

Both work on the raw parsed tree, before any cleaning or conversion, and
never modify it.
"""

from __future__ import annotations

from copy import deepcopy
from typing import List, Optional

import structlog
from lxml import etree
from lxml.etree import _Element, XPath

from ..constants import (
    BASELINE_DIV_TRIGGER,
    BASELINE_MIN_CODE,
    BASELINE_MIN_DIV,
    BASELINE_MIN_ITEM,
    BASELINE_MIN_PARAGRAPH,
    BASELINE_MIN_QUOTE,
    SMART_BASELINE_ACCEPT,
)
from ..utils.text import text_chars_test, trim
from ..utils.tree import delete_element, text_content
from .models import ExtractionResult

logger = structlog.get_logger(__name__)

UNSAFE_TAGS = ("script", "style", "noscript", "iframe", "embed", "object")
JUNK_MARKERS = ("advertisement", "ad-container", "banner-ad", "cookie-notice", "popup-ad", "modal-ad")
BLOCK_CHILDREN = frozenset({"p", "div", "article", "section", "ul", "ol", "table"})


def _class_selector(name: str) -> str:
    return f".//*[contains(concat(' ', normalize-space(@class), ' '), ' {name} ')]"


# Likely content containers, most specific first.
CONTENT_AREA_XPATH: List[XPath] = [
    XPath(expression)
    for expression in (
        ".//article",
        ".//main",
        ".//*[@role='main']",
        ".//*[@id='content']",
        _class_selector("content"),
        ".//*[@id='main']",
        _class_selector("main"),
        ".//*[@id='article']",
        _class_selector("article"),
        _class_selector("post-content"),
        _class_selector("entry-content"),
    )
]


def sanitize_tree(tree: _Element) -> _Element:
    """Return a copy of the tree without scripts, embeds and advertising blocks."""
    cleaned = deepcopy(tree)
    etree.strip_elements(cleaned, etree.Comment, *UNSAFE_TAGS, with_tail=False)
    for element in list(cleaned.iter(etree.Element)):
        marker = f"{element.get('class', '')} {element.get('id', '')}".lower()
        if any(junk in marker for junk in JUNK_MARKERS):
            delete_element(element)
    return cleaned


def _texts(tree: _Element, expression: str, min_length: int) -> List[str]:
    texts = []
    for element in tree.xpath(expression):
        text = trim(text_content(element))
        if len(text) >= min_length:
            texts.append(text)
    return texts


def baseline(tree: _Element) -> ExtractionResult:
    """
    Collect sufficiently long paragraphs, list items, quotes and code
    blocks. Childless divs are added when the rest yields little text.
    """
    cleaned = sanitize_tree(tree)
    body = etree.Element("body")
    total = 0

    for text in _texts(cleaned, ".//p", BASELINE_MIN_PARAGRAPH):
        if text_chars_test(text):
            etree.SubElement(body, "p").text = text
            total += len(text)

    items = _texts(cleaned, ".//li", BASELINE_MIN_ITEM)
    if items:
        item_list = etree.SubElement(body, "list")
        for text in items:
            etree.SubElement(item_list, "item").text = text
            total += len(text)

    for text in _texts(cleaned, ".//blockquote|.//q", BASELINE_MIN_QUOTE):
        etree.SubElement(body, "quote").text = text
        total += len(text)

    for text in _texts(cleaned, ".//pre|.//code[not(ancestor::pre)]", BASELINE_MIN_CODE):
        etree.SubElement(body, "code").text = text
        total += len(text)

    if total < BASELINE_DIV_TRIGGER:
        for div in cleaned.iter("div"):
            if any(child.tag in BLOCK_CHILDREN for child in div):
                continue
            text = trim(text_content(div))
            if len(text) >= BASELINE_MIN_DIV:
                etree.SubElement(body, "p").text = text

    result = ExtractionResult.from_body(body)
    logger.debug("Baseline extraction finished", length=result.length)
    return result


def find_content_area(tree: _Element) -> Optional[_Element]:
    """Return the first element matching a content-area selector."""
    for expression in CONTENT_AREA_XPATH:
        matches = expression(tree)
        if matches:
            return matches[0]
    return None


def smart_baseline(tree: _Element) -> ExtractionResult:
    """Run the baseline on the likely content area, then on the whole page if needed."""
    area = find_content_area(tree)
    area_result = baseline(area if area is not None else tree)
    if area_result.length >= SMART_BASELINE_ACCEPT:
        return area_result

    whole_result = baseline(tree)
    if whole_result.length > area_result.length:
        return whole_result
    return area_result
