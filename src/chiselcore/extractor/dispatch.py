"""
Tag-based routing of source elements to their handlers.
"""

from __future__ import annotations

from typing import AbstractSet, Callable, Optional

from lxml import etree
from lxml.etree import _Element

from ..constants import FORMATTING
from ..utils.text import text_chars_test
from .context import ExtractionContext
from .handlers import (
    handle_formatting,
    handle_lists,
    handle_other_elements,
    handle_paragraphs,
    handle_quotes,
    handle_titles,
)
from .images import handle_image
from .nodes import process_node
from .tables import handle_table

Handler = Callable[[_Element, AbstractSet[str], ExtractionContext], Optional[_Element]]


def _list_handler(element: _Element, potential_tags: AbstractSet[str], ctx: ExtractionContext) -> Optional[_Element]:
    return handle_lists(element, ctx)


def _quote_handler(element: _Element, potential_tags: AbstractSet[str], ctx: ExtractionContext) -> Optional[_Element]:
    return handle_quotes(element, ctx)


def _title_handler(element: _Element, potential_tags: AbstractSet[str], ctx: ExtractionContext) -> Optional[_Element]:
    return handle_titles(element, ctx)


def _formatting_handler(
    element: _Element, potential_tags: AbstractSet[str], ctx: ExtractionContext
) -> Optional[_Element]:
    return handle_formatting(element, ctx)


def _image_handler(element: _Element, potential_tags: AbstractSet[str], ctx: ExtractionContext) -> Optional[_Element]:
    return handle_image(element, ctx)


def _line_break_handler(
    element: _Element, potential_tags: AbstractSet[str], ctx: ExtractionContext
) -> Optional[_Element]:
    """Turn the text hanging after a line break into a paragraph."""
    if not text_chars_test(element.tail):
        return None
    node = process_node(element, ctx)
    if node is None or not node.tail:
        return None
    paragraph = etree.Element("p")
    paragraph.text = node.tail
    return paragraph


HANDLERS = {
    "list": _list_handler,
    "code": _quote_handler,
    "quote": _quote_handler,
    "head": _title_handler,
    "p": handle_paragraphs,
    "lb": _line_break_handler,
}


def get_handler(tag: str, potential_tags: AbstractSet[str]) -> Handler:
    """Pick the handler for a tag; anything unknown goes to the catch-all."""
    if tag in HANDLERS:
        return HANDLERS[tag]
    if tag in FORMATTING:
        return _formatting_handler
    if tag == "table" and "table" in potential_tags:
        return handle_table
    if tag == "graphic" and "graphic" in potential_tags:
        return _image_handler
    return handle_other_elements


def handle_text_element(
    element: _Element, potential_tags: AbstractSet[str], ctx: ExtractionContext
) -> Optional[_Element]:
    """Process an element with the handler registered for its tag."""
    if ctx.is_processed(element):
        return None
    handler = get_handler(element.tag, potential_tags)
    result = handler(element, potential_tags, ctx)
    ctx.mark(element)
    return result
