"""
Extraction of the user comments section.
"""

from __future__ import annotations

import structlog
from lxml import etree
from lxml.etree import _Element

from ..constants import TAG_CATALOG
from ..processing.cleaning import prune_unwanted_nodes
from ..processing.xpaths import COMMENTS_DISCARD_XPATH, COMMENTS_XPATH
from ..utils.tree import delete_element, finalize_output
from .context import ExtractionContext
from .dispatch import handle_text_element
from .models import ExtractionResult

logger = structlog.get_logger(__name__)


def extract_comments(tree: _Element, ctx: ExtractionContext) -> ExtractionResult:
    """
    Try to extract comments out of potential sections in the HTML.

    The first comments section yielding content is removed from the tree,
    so the main extraction does not pick it up again.
    """
    comments_body = etree.Element("body")
    potential_tags = set(TAG_CATALOG)

    for expression in COMMENTS_XPATH:
        subtree = next(iter(expression(tree)), None)
        if subtree is None:
            continue
        subtree = prune_unwanted_nodes(subtree, COMMENTS_DISCARD_XPATH)
        etree.strip_tags(subtree, "a", "ref", "span")

        for element in subtree.xpath(".//*"):
            processed = handle_text_element(element, potential_tags, ctx)
            if processed is not None:
                processed.attrib.clear()
                comments_body.append(processed)

        if len(comments_body) > 0:
            delete_element(subtree, keep_tail=False)
            break

    result = ExtractionResult.from_body(finalize_output(comments_body))
    logger.debug("Comments extraction finished", length=result.length)
    return result
