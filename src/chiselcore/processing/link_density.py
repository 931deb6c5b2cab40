"""
Link-density heuristics for spotting navigation and link farms.

An element is judged by comparing the length of the text inside its
``ref`` descendants with the length of its own full text.
"""

from __future__ import annotations

from typing import List, Tuple

import structlog
from lxml.etree import XPath, _Element

from ..utils.text import trim
from ..utils.tree import delete_element, text_content

logger = structlog.get_logger(__name__)

LINKS_XPATH = XPath(".//ref|.//a")

SHORT_LINK_LENGTH = 10


def collect_link_info(links: List[_Element]) -> Tuple[int, int, int, List[str]]:
    """
    Summarize the anchors of an element.

    Returns the total link text length, the number of non-empty links, the
    number of short links and the link texts themselves.
    """
    texts = [text for text in (trim(text_content(link)) for link in links) if text]
    short_count = sum(1 for text in texts if len(text) < SHORT_LINK_LENGTH)
    return sum(len(text) for text in texts), len(texts), short_count, texts


def link_density_test(element: _Element, text: str, favor_precision: bool = False) -> Tuple[bool, List[str]]:
    """
    Decide whether an element is mostly made of links.

    Args:
        element: Element under test
        text: Trimmed full text of the element
        favor_precision: Use the stricter single-link threshold

    Returns:
        Tuple of the verdict (True means discard) and the link texts found
    """
    links = LINKS_XPATH(element)
    if not links:
        return False, []

    if len(links) == 1:
        len_threshold = 10 if favor_precision else 100
        link_text = trim(text_content(links[0]))
        if len(link_text) > len_threshold and len(link_text) > len(text) * 0.9:
            return True, []

    if element.tag == "p":
        limit_len = 60 if element.getnext() is None else 30
    else:
        limit_len = 300 if element.getnext() is None else 100

    element_len = len(text)
    link_texts: List[str] = []
    if element_len < limit_len:
        link_len, element_num, short_count, link_texts = collect_link_info(links)
        if element_num == 0:
            return True, link_texts
        logger.debug(
            "Testing link density",
            tag=element.tag,
            link_len=link_len,
            element_len=element_len,
            links=element_num,
            short_links=short_count,
        )
        if link_len > element_len * 0.8 or (element_num > 1 and short_count / element_num > 0.8):
            return True, link_texts
    return False, link_texts


def link_density_test_tables(element: _Element) -> bool:
    """Decide whether a table is mostly made of links."""
    links = LINKS_XPATH(element)
    if not links:
        return False

    element_len = len(trim(text_content(element)))
    if element_len < 200:
        return False

    link_len, element_num, _, _ = collect_link_info(links)
    if element_num == 0:
        return True

    logger.debug("Testing table link density", link_len=link_len, element_len=element_len)
    if element_len < 1000:
        return link_len > 0.8 * element_len
    return link_len > 0.5 * element_len


def delete_by_link_density(
    subtree: _Element, tag: str, backtracking: bool = False, favor_precision: bool = False
) -> _Element:
    """
    Remove every ``tag`` element of the subtree failing the link-density test.

    With backtracking, short elements holding links and several children are
    removed as well.
    """
    len_threshold = 200 if favor_precision else 100
    depth_threshold = 1 if favor_precision else 3

    deletions = []
    for element in subtree.iter(tag):
        text = trim(text_content(element))
        discard, link_texts = link_density_test(element, text, favor_precision)
        if discard or (
            backtracking and link_texts and 0 < len(text) < len_threshold and len(element) >= depth_threshold
        ):
            deletions.append(element)

    for element in dict.fromkeys(deletions):
        delete_element(element)
    return subtree
