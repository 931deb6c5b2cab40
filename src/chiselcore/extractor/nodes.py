"""
Generic text-node primitives used by every element handler.

Both functions return a detached copy of the source element without its
children, or None when the node contributes nothing. The source element is
marked processed either way.
"""

from __future__ import annotations

from typing import Optional

import structlog
from lxml.etree import _Element

from ..utils.text import is_image_element, text_chars_test, text_filter, trim
from ..utils.tree import shallow_copy
from .context import ExtractionContext

logger = structlog.get_logger(__name__)


def process_node(
    element: _Element,
    ctx: ExtractionContext,
    check_duplicates: bool = True,
    preserve_spaces: bool = False,
) -> Optional[_Element]:
    """
    Trim the text of a node and test it for boilerplate.

    Tail text is promoted to text when the node has none, except for line
    breaks whose tail must stay outside. With ``preserve_spaces`` the
    whitespace around inline content is kept so that neighbouring runs do
    not merge.
    """
    if ctx.is_processed(element) or (len(element) == 0 and not element.text and not element.tail):
        return None
    ctx.mark(element)

    node = shallow_copy(element)
    if preserve_spaces:
        node.text = element.text if text_chars_test(element.text) else None
        node.tail = element.tail if text_chars_test(element.tail) else None
    else:
        node.text = trim(element.text) or None
        node.tail = trim(element.tail) or None
    if node.tag != "lb" and not node.text and node.tail:
        node.text, node.tail = node.tail, None

    if node.text or node.tail:
        if text_filter(node) or (check_duplicates and ctx.is_duplicate(node)):
            logger.debug("Discarding node", tag=element.tag)
            return None
    return node


def handle_text_node(
    element: _Element,
    ctx: ExtractionContext,
    comments_fix: bool = True,
    preserve_spaces: bool = False,
    check_duplicates: bool = True,
) -> Optional[_Element]:
    """
    Convert a node into its output form, rescuing hanging tail text.

    A childless node without text takes its tail as text so the words are
    not lost when the carrier is dropped. With ``comments_fix`` such a line
    break becomes a paragraph.
    """
    if element.tag == "graphic" and is_image_element(element):
        ctx.mark(element)
        return shallow_copy(element)
    if ctx.is_processed(element) or (len(element) == 0 and not element.text and not element.tail):
        return None
    ctx.mark(element)

    node = shallow_copy(element)
    if not comments_fix and node.tag == "lb":
        if not preserve_spaces:
            node.tail = trim(node.tail) or None
        return node

    if not node.text and len(element) == 0:
        node.text, node.tail = node.tail, None
        if comments_fix and node.tag == "lb":
            node.tag = "p"

    if not preserve_spaces:
        node.text = trim(node.text) or None
        node.tail = trim(node.tail) or None

    if (not node.text and text_filter(node)) or (check_duplicates and ctx.is_duplicate(node)):
        return None
    return node
