"""
Tree cleaning: drop junk elements, unwrap transparent ones, prune boilerplate.
"""

from __future__ import annotations

from copy import deepcopy
from typing import AbstractSet, Iterable, List

import structlog
from lxml import etree
from lxml.etree import XPath, _Element

from ..config.config import ExtractorConfig
from ..constants import (
    CUT_EMPTY_ELEMS,
    MANUALLY_CLEANED,
    MANUALLY_STRIPPED,
    PRESERVE_IMG_CLEANING,
    TABLE_CLEANING,
)
from ..utils.text import trim
from ..utils.tree import delete_element, text_content
from .link_density import delete_by_link_density, link_density_test_tables
from .xpaths import (
    DISCARD_IMAGE_ELEMENTS,
    OVERALL_DISCARD_XPATH,
    PRECISION_DISCARD_XPATH,
    TEASER_DISCARD_XPATH,
)

logger = structlog.get_logger(__name__)


def _delete_tags(tree: _Element, tags: Iterable[str], keep_tail: bool) -> None:
    for element in list(tree.iter(*tags)):
        delete_element(element, keep_tail=keep_tail)


def tree_cleaning(tree: _Element, config: ExtractorConfig) -> _Element:
    """
    Remove denylisted elements and unwrap transparent ones.

    The tree is modified in place; callers own the copy they pass in.
    In recall mode the removal is rolled back when it would leave no
    paragraph in a tree that had some.
    """
    cleaning_list: List[str] = list(MANUALLY_CLEANED)
    stripping_list: List[str] = list(MANUALLY_STRIPPED)
    if not config.tables:
        cleaning_list.extend(TABLE_CLEANING)
    else:
        for element in tree.xpath(".//figure[descendant::table]"):
            element.tag = "div"
    if config.images:
        cleaning_list = [tag for tag in cleaning_list if tag not in PRESERVE_IMG_CLEANING]
        stripping_list.remove("img")

    etree.strip_elements(tree, etree.Comment, etree.ProcessingInstruction, with_tail=False)
    etree.strip_tags(tree, *stripping_list)

    keep_tail = not config.favor_precision
    if config.favor_recall and tree.find(".//p") is not None:
        backup = deepcopy(tree)
        _delete_tags(tree, cleaning_list, keep_tail)
        if tree.find(".//p") is None:
            logger.debug("Cleaning removed every paragraph, restoring tree")
            tree = backup
    else:
        _delete_tags(tree, cleaning_list, keep_tail)

    return prune_html(tree, config)


def prune_html(tree: _Element, config: ExtractorConfig) -> _Element:
    """Delete empty wrapper elements."""
    keep_tail = not config.favor_precision
    for element in tree.xpath(".//*[not(node())]"):
        if element.tag in CUT_EMPTY_ELEMS:
            delete_element(element, keep_tail=keep_tail)
    return tree


def prune_unwanted_nodes(tree: _Element, expressions: List[XPath], with_backup: bool = False) -> _Element:
    """
    Delete every element matched by the expressions, keeping their tails.

    With ``with_backup`` a copy of the tree is returned instead when the
    deletions removed more than six sevenths of the text.
    """
    if with_backup:
        old_len = len(text_content(tree))
        backup = deepcopy(tree)

    for expression in expressions:
        for subtree in expression(tree):
            delete_element(subtree)

    if with_backup:
        new_len = len(text_content(tree))
        if new_len <= old_len / 7:
            logger.debug("Boilerplate pruning removed too much text, restoring", old_len=old_len, new_len=new_len)
            return backup
    return tree


def prune_unwanted_sections(tree: _Element, potential_tags: AbstractSet[str], config: ExtractorConfig) -> _Element:
    """Rule-based deletion of boilerplate sections within a candidate subtree."""
    favor_precision = config.favor_precision

    tree = prune_unwanted_nodes(tree, OVERALL_DISCARD_XPATH, with_backup=True)

    if "graphic" not in potential_tags:
        tree = prune_unwanted_nodes(tree, DISCARD_IMAGE_ELEMENTS)
    if not config.favor_recall:
        tree = prune_unwanted_nodes(tree, TEASER_DISCARD_XPATH)
        if favor_precision:
            tree = prune_unwanted_nodes(tree, PRECISION_DISCARD_XPATH)

    # second pass catches elements exposed by the first
    for _ in range(2):
        tree = delete_by_link_density(tree, "div", backtracking=True, favor_precision=favor_precision)
        tree = delete_by_link_density(tree, "list", backtracking=False, favor_precision=favor_precision)
        tree = delete_by_link_density(tree, "p", backtracking=False, favor_precision=favor_precision)

    if "table" in potential_tags or favor_precision:
        for table in list(tree.iter("table")):
            if link_density_test_tables(table):
                delete_element(table, keep_tail=False)

    if favor_precision:
        while len(tree) > 0 and tree[-1].tag == "head":
            delete_element(tree[-1], keep_tail=False)
        tree = delete_by_link_density(tree, "head", backtracking=False, favor_precision=True)
        tree = delete_by_link_density(tree, "quote", backtracking=False, favor_precision=True)

    logger.debug("Pruned candidate subtree", tag=tree.tag, text_len=len(trim(text_content(tree))))
    return tree
