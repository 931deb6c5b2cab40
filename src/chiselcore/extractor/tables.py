"""
Table handling.
"""

from __future__ import annotations

from typing import AbstractSet, Callable, Optional, Set, Tuple

import structlog
from lxml import etree
from lxml.etree import _Element

from ..constants import TABLE_ALL, TABLE_ELEMS
from ..processing.link_density import link_density_test_tables
from ..utils.text import text_chars_test, trim
from ..utils.tree import strip_trailing_space
from .context import ExtractionContext
from .handlers import handle_lists
from .nodes import handle_text_node, process_node

logger = structlog.get_logger(__name__)


def _colspan(cell: _Element) -> int:
    try:
        return max(int(cell.get("colspan", 1)), 1)
    except ValueError:
        return 1


def column_layout(table_elem: _Element) -> Tuple[int, Set[int]]:
    """Return the widest row in columns and the set of colspan values seen."""
    max_cols = 0
    diff_colspans: Set[int] = set()
    for row in table_elem.iter("tr"):
        total_colspans = 0
        for cell in row.iter("td", "th"):
            colspan = _colspan(cell)
            diff_colspans.add(colspan)
            total_colspans += colspan
        max_cols = max(max_cols, total_colspans)
    return max_cols, diff_colspans


def define_cell_type(is_header: bool) -> _Element:
    """Determine cell element type and mint new element."""
    cell = etree.Element("cell")
    if is_header:
        cell.set("role", "head")
    return cell


def handle_table(
    table_elem: _Element, potential_tags: AbstractSet[str], ctx: ExtractionContext
) -> Optional[_Element]:
    """
    Process single table element into rows of cells.

    The first row holding header cells marks them with ``role="head"``; any
    later header cell is a plain cell. Rows carry the widest column count as
    ``span`` unless every cell of the table shares one colspan value. A
    nested table stops processing and is left to a later pass.
    """
    from .dispatch import handle_text_element

    ctx.mark(table_elem)
    if link_density_test_tables(table_elem):
        ctx.mark_subtree(table_elem)
        return None

    etree.strip_tags(table_elem, "thead", "tbody", "tfoot")
    max_cols, diff_colspans = column_layout(table_elem)
    row_attrs = {"span": str(max_cols)} if max_cols > 1 else {}

    newtable = etree.Element("table")
    newrow = etree.Element("row", **row_attrs)
    seen_header_row = False
    seen_header = False
    nested = False
    cell_tags = set(potential_tags) | {"div"}

    for subelement in table_elem.iterdescendants():
        if ctx.is_processed(subelement):
            continue
        if subelement.tag == "tr":
            if len(newrow) > 0:
                newtable.append(newrow)
                newrow = etree.Element("row", **row_attrs)
                seen_header_row = seen_header_row or seen_header
        elif subelement.tag in TABLE_ELEMS:
            is_header = subelement.tag == "th" and not seen_header_row
            seen_header = seen_header or is_header
            newcell = define_cell_type(is_header)
            if len(subelement) == 0:
                processed_cell = process_node(subelement, ctx)
                if processed_cell is not None:
                    newcell.text, newcell.tail = processed_cell.text, processed_cell.tail
            else:
                nested = _fill_cell(newcell, subelement, cell_tags, ctx, handle_text_element)
            if newcell.text or len(newcell) > 0:
                newrow.append(newcell)
            if nested:
                break
        elif subelement.tag == "table":
            break
        ctx.mark(subelement)

    if len(newrow) > 0:
        newtable.append(newrow)
    if len(diff_colspans) == 1:
        for row in newtable:
            row.attrib.pop("span", None)

    if len(newtable) == 0:
        logger.debug("Discarding empty table")
        return None
    newtable.tail = trim(table_elem.tail) or None
    return newtable


def _fill_cell(
    newcell: _Element,
    cell: _Element,
    cell_tags: AbstractSet[str],
    ctx: ExtractionContext,
    dispatch: Callable[[_Element, AbstractSet[str], ExtractionContext], Optional[_Element]],
) -> bool:
    """Rebuild the children of a cell, returning True when a nested table was hit."""
    ctx.mark(cell)
    newcell.text = cell.text.lstrip() if text_chars_test(cell.text) else None
    newcell.tail = trim(cell.tail) or None
    nested = False
    for child in cell.iterdescendants():
        if ctx.is_processed(child):
            continue
        if child.tag == "table":
            nested = True
            break
        if child.tag in TABLE_ALL:
            processed_child = handle_text_node(child, ctx, comments_fix=True, preserve_spaces=True)
            if processed_child is not None and processed_child.tag in TABLE_ELEMS:
                processed_child.tag = "cell"
        elif child.tag == "list" and ctx.config.favor_recall:
            processed_child = handle_lists(child, ctx)
            ctx.mark_subtree(child)
        else:
            processed_child = dispatch(child, cell_tags, ctx)
        if processed_child is not None:
            newcell.append(processed_child)
        ctx.mark(child)
    strip_trailing_space(newcell)
    return nested
