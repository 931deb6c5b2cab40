"""
Element handlers turning cleaned source nodes into output elements.

Handlers never move source nodes: they build detached copies and record
every consumed source element in the extraction context. A handler that
rejects a node returns None.
"""

from __future__ import annotations

from copy import deepcopy
from typing import AbstractSet, Optional

import structlog
from lxml import etree
from lxml.etree import _Element

from ..constants import FORMATTING_PROTECTED, P_FORMATTING
from ..utils.text import text_chars_test, trim
from ..utils.tree import append_text, copy_attributes, shallow_copy, strip_trailing_space, text_content
from .context import ExtractionContext
from .images import handle_image
from .nodes import handle_text_node, process_node

logger = structlog.get_logger(__name__)


def _flatten(element: _Element, ctx: ExtractionContext) -> Optional[_Element]:
    """Collapse an inline element with children into a single text node."""
    ctx.mark_subtree(element)
    flat = deepcopy(element)
    flat.tail = None
    for sub in flat.iterdescendants():
        if text_chars_test(sub.text):
            sub.text = " " + sub.text
    node = shallow_copy(element)
    node.text = "".join(flat.itertext())
    if not text_chars_test(node.text):
        return None
    return node


def handle_titles(element: _Element, ctx: ExtractionContext) -> Optional[_Element]:
    """Process head elements (titles)."""
    if len(element) == 0:
        return process_node(element, ctx)

    ctx.mark(element)
    title = shallow_copy(element)
    title.tail = trim(element.tail) or None
    for child in element:
        if len(child) > 0:
            processed_child = _flatten(child, ctx)
        else:
            processed_child = handle_text_node(child, ctx, comments_fix=False, preserve_spaces=True)
        if processed_child is not None:
            title.append(processed_child)

    if text_chars_test("".join(title.itertext())):
        return title
    return None


def handle_formatting(element: _Element, ctx: ExtractionContext) -> Optional[_Element]:
    """Process inline formatting elements, wrapping orphans in a paragraph."""
    formatting = process_node(element, ctx, preserve_spaces=True)
    if formatting is None:
        return None

    parent = element.getparent()
    if parent is None or parent.tag not in FORMATTING_PROTECTED:
        paragraph = etree.Element("p")
        paragraph.append(formatting)
        return paragraph
    return formatting


def handle_paragraphs(
    element: _Element, potential_tags: AbstractSet[str], ctx: ExtractionContext
) -> Optional[_Element]:
    """
    Process paragraphs along with their children, trimming and cleaning the content.

    Children outside the allowed tags are dropped but their tail text is
    kept. Nested paragraphs are merged into the parent text and inline
    formatting with nested markup is flattened.
    """
    if len(element) == 0:
        processed = process_node(element, ctx)
        if processed is not None:
            processed.attrib.clear()
        return processed

    ctx.mark(element)
    if ctx.is_duplicate(element):
        ctx.mark_subtree(element)
        return None

    processed = etree.Element("p")
    if text_chars_test(element.text):
        processed.text = element.text
    processed.tail = trim(element.tail) or None

    for child in element.iterdescendants():
        if ctx.is_processed(child):
            continue
        if child.tag not in potential_tags:
            logger.debug("Unexpected element in paragraph", tag=child.tag)
            ctx.mark_subtree(child)
            append_text(processed, child.tail)
            continue

        if child.tag == "graphic":
            image = handle_image(child, ctx)
            if image is None:
                append_text(processed, child.tail)
            else:
                processed.append(image)
            continue

        if child.tag in P_FORMATTING and len(child) > 0:
            newsub = _flatten(child, ctx)
        else:
            newsub = handle_text_node(child, ctx, comments_fix=False, preserve_spaces=True, check_duplicates=False)
        if newsub is None:
            append_text(processed, child.tail)
            continue

        if newsub.tag == "p":
            append_text(processed, newsub.text)
            append_text(processed, newsub.tail)
            continue
        newsub.attrib.clear()
        copy_attributes(newsub, child, ("rend", "target"))
        processed.append(newsub)

    if len(processed) > 0 and processed[-1].tag == "lb" and not processed[-1].tail:
        processed.remove(processed[-1])

    if len(processed) > 0 or text_chars_test(processed.text):
        return processed
    logger.debug("Discarding empty paragraph", text=trim(text_content(element))[:50])
    return None


def add_sub_element(new_item: _Element, source: _Element, processed: _Element) -> None:
    """Append a processed child to a list item, keeping output attributes of its source."""
    sub_element = etree.SubElement(new_item, processed.tag)
    sub_element.text, sub_element.tail = processed.text, processed.tail
    copy_attributes(sub_element, source, ("rend", "target", "src", "alt", "title"))


def process_nested_elements(child: _Element, new_item: _Element, ctx: ExtractionContext) -> None:
    """Iterate through an item's descendants and rebuild them under the new item."""
    new_item.text = child.text if text_chars_test(child.text) else None
    for sub in child.iterdescendants():
        if ctx.is_processed(sub):
            continue
        if sub.tag == "list":
            processed_list = handle_lists(sub, ctx)
            if processed_list is not None:
                new_item.append(processed_list)
            ctx.mark_subtree(sub)
            continue
        processed_sub = handle_text_node(sub, ctx, comments_fix=False, preserve_spaces=True)
        if processed_sub is not None:
            add_sub_element(new_item, sub, processed_sub)
        ctx.mark(sub)


def handle_lists(element: _Element, ctx: ExtractionContext) -> Optional[_Element]:
    """Process lists elements including their descendants."""
    ctx.mark(element)
    processed = etree.Element(element.tag)
    copy_attributes(processed, element, ("rend",))

    if text_chars_test(element.text):
        item = etree.SubElement(processed, "item")
        item.text = trim(element.text)

    for child in list(element.iterdescendants("item")):
        if ctx.is_processed(child):
            continue
        new_item = etree.Element("item")
        if len(child) == 0:
            processed_child = process_node(child, ctx)
            if processed_child is not None:
                new_item.text = processed_child.text
                if text_chars_test(processed_child.tail):
                    new_item.text = f"{new_item.text or ''} {processed_child.tail}".strip()
        else:
            process_nested_elements(child, new_item, ctx)
            append_text(new_item, trim(child.tail))
        ctx.mark(child)

        if new_item.text or len(new_item) > 0:
            copy_attributes(new_item, child, ("rend",))
            processed.append(new_item)

    if text_chars_test(text_content(processed)):
        processed.tail = trim(element.tail) or None
        return processed
    return None


def is_code_block_element(element: _Element) -> bool:
    """Check if an element is a code block based on its attributes and structure."""
    if element.get("lang") or element.tag == "code":
        return True
    parent = element.getparent()
    if parent is not None and "highlight" in parent.get("class", ""):
        return True
    return len(element) == 1 and element[0].tag == "code"


def handle_code_blocks(element: _Element, ctx: ExtractionContext) -> _Element:
    """Copy a code block verbatim, keeping only its text and line breaks."""
    ctx.mark_subtree(element)
    processed = deepcopy(element)
    processed.tag = "code"
    processed.attrib.clear()
    copy_attributes(processed, element, ("lang",))
    inner = {sub.tag for sub in processed.iterdescendants() if sub.tag != "lb"}
    if inner:
        etree.strip_tags(processed, *inner)
    return processed


def handle_quotes(element: _Element, ctx: ExtractionContext) -> Optional[_Element]:
    """Process quotes and code blocks."""
    if is_code_block_element(element):
        return handle_code_blocks(element, ctx)

    if len(element) == 0:
        processed = process_node(element, ctx)
        if processed is not None:
            processed.attrib.clear()
        return processed

    ctx.mark(element)
    processed = etree.Element("quote")
    processed.text = element.text.lstrip() if text_chars_test(element.text) else None
    processed.tail = trim(element.tail) or None
    for child in element.iterdescendants():
        processed_child = process_node(child, ctx, preserve_spaces=True)
        if processed_child is not None:
            processed.append(processed_child)
    etree.strip_tags(processed, "quote")
    strip_trailing_space(processed)

    if text_chars_test(text_content(processed)):
        return processed
    return None


def handle_other_elements(
    element: _Element, potential_tags: AbstractSet[str], ctx: ExtractionContext
) -> Optional[_Element]:
    """Handle diverse or unknown elements in the scope of relevant tags."""
    if element.tag == "div" and "w3-code" in element.get("class", ""):
        return handle_code_blocks(element, ctx)

    if element.tag not in potential_tags:
        if not ctx.is_processed(element):
            logger.debug("Discarding element", tag=element.tag, text=trim(element.text)[:50])
        return None

    if element.tag != "div":
        return None

    if len(element) > 0 and all(child.tag == "lb" for child in element):
        return _line_broken_div(element, ctx)

    processed = handle_text_node(element, ctx, comments_fix=False, preserve_spaces=True)
    if processed is None or not text_chars_test(processed.text):
        return None
    processed.attrib.clear()
    processed.tag = "p"
    processed.text = processed.text.strip()
    processed.tail = trim(processed.tail) or None
    return processed


def _line_broken_div(element: _Element, ctx: ExtractionContext) -> Optional[_Element]:
    ctx.mark_subtree(element)
    processed = etree.Element("p")
    processed.text = trim(element.text) or None
    processed.tail = trim(element.tail) or None
    for line_break in element:
        etree.SubElement(processed, "lb").tail = trim(line_break.tail) or None
    while len(processed) > 0 and not processed[-1].tail:
        processed.remove(processed[-1])
    if text_chars_test(text_content(processed)):
        return processed
    return None
