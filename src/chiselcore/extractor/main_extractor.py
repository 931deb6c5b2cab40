"""
Main content extraction over the cleaned and converted tree.
"""

from __future__ import annotations

from copy import deepcopy
from typing import List, Set, Tuple

import structlog
from lxml import etree
from lxml.etree import _Element

from ..constants import NOT_AT_THE_END, TAG_CATALOG
from ..processing.cleaning import prune_unwanted_sections
from ..processing.xpaths import BODY_XPATH, WILD_TEXT_RECALL_XPATH, WILD_TEXT_XPATH
from ..utils.tree import finalize_output
from .context import ExtractionContext
from .dispatch import handle_text_element
from .models import ExtractionResult

logger = structlog.get_logger(__name__)


def potential_tags_for(ctx: ExtractionContext) -> Set[str]:
    """Tags the handlers may emit under the current options."""
    config = ctx.config
    potential_tags = set(TAG_CATALOG)
    if config.tables:
        potential_tags.update({"table", "td", "th", "tr"})
    if config.images:
        potential_tags.add("graphic")
    if config.links:
        potential_tags.add("ref")
    return potential_tags


def _extract(tree: _Element, ctx: ExtractionContext) -> Tuple[_Element, Set[str]]:
    """Try the body expressions in order and keep the first one yielding content."""
    config = ctx.config
    potential_tags = potential_tags_for(ctx)
    result_body = etree.Element("body")

    for index, expression in enumerate(BODY_XPATH):
        subtree = next(iter(expression(tree)), None)
        if subtree is None:
            continue
        subtree = prune_unwanted_sections(subtree, potential_tags, config)
        if len(subtree) == 0:
            continue

        ptest = subtree.xpath(".//p//text()")
        factor = 1 if config.favor_precision else 3
        if not ptest or len("".join(ptest)) < config.min_extracted_size * factor:
            potential_tags.add("div")

        if "ref" not in potential_tags:
            etree.strip_tags(subtree, "ref")
        if "span" not in potential_tags:
            etree.strip_tags(subtree, "span")

        subelems: List[_Element] = subtree.xpath(".//*")
        if {element.tag for element in subelems} == {"lb"}:
            subelems = [subtree]

        for element in subelems:
            processed = handle_text_element(element, potential_tags, ctx)
            if processed is not None:
                result_body.append(processed)

        while len(result_body) > 0 and result_body[-1].tag in NOT_AT_THE_END:
            result_body.remove(result_body[-1])

        if len(result_body) > 1:
            logger.debug("Main content found", expression=index, elements=len(result_body))
            break

    return result_body, potential_tags


def recover_wild_text(
    tree: _Element, result_body: _Element, potential_tags: Set[str], ctx: ExtractionContext
) -> _Element:
    """
    Look for all previously unconsidered wild elements, including outside of
    the determined frame and throughout the document, to recover potentially
    missing text parts.
    """
    config = ctx.config
    logger.debug("Recovering wild text elements")
    if config.favor_recall:
        potential_tags = potential_tags | {"div", "lb"}
        expression = WILD_TEXT_RECALL_XPATH
    else:
        expression = WILD_TEXT_XPATH

    search_tree = prune_unwanted_sections(tree, potential_tags, config)
    if "ref" not in potential_tags:
        etree.strip_tags(search_tree, "a", "ref", "span")
    else:
        etree.strip_tags(search_tree, "span")

    for element in expression(search_tree):
        processed = handle_text_element(element, potential_tags, ctx)
        if processed is not None:
            result_body.append(processed)
    return result_body


def extract_content(cleaned_tree: _Element, ctx: ExtractionContext) -> ExtractionResult:
    """Find the main content of a page using a set of XPath expressions,
    then extract relevant elements, strip them of unwanted subparts and
    convert them."""
    backup_tree = deepcopy(cleaned_tree)
    # deepcopy keeps document order, so both iterations pair up
    counterparts = dict(zip(cleaned_tree.iter(), backup_tree.iter()))

    result_body, potential_tags = _extract(cleaned_tree, ctx)
    result = ExtractionResult.from_body(finalize_output(result_body))

    if len(result_body) == 0 or result.length < ctx.config.min_extracted_size:
        consumed = [counterparts[element] for element in ctx.processed if element in counterparts]
        ctx.processed.update(consumed)
        result_body = recover_wild_text(backup_tree, result_body, potential_tags, ctx)
        result = ExtractionResult.from_body(finalize_output(result_body))

    logger.debug("Main extraction finished", length=result.length)
    return result
