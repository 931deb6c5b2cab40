"""
Parse raw markup into an lxml tree.
"""

from __future__ import annotations

from typing import Optional, Union

import structlog
from lxml import etree, html
from lxml.etree import _Element

logger = structlog.get_logger(__name__)

HTML_PARSER = html.HTMLParser(remove_comments=True, remove_pis=True, collect_ids=False, default_doctype=False)
UTF8_PARSER = html.HTMLParser(
    remove_comments=True, remove_pis=True, collect_ids=False, default_doctype=False, encoding="utf-8"
)


def load_html(markup: Union[str, bytes, _Element, None]) -> Optional[_Element]:
    """
    Turn a string or bytes into an HTML tree.

    Trees are passed through untouched. Returns None for empty or
    unparsable input.
    """
    if markup is None:
        return None
    if isinstance(markup, etree._Element):
        return markup
    if isinstance(markup, str):
        if not markup.strip():
            return None
        # lxml refuses str input carrying an encoding declaration
        markup, parser = markup.encode("utf-8"), UTF8_PARSER
    elif not markup.strip():
        return None
    else:
        parser = HTML_PARSER
    try:
        tree = html.document_fromstring(markup, parser=parser)
    except (etree.ParserError, etree.XMLSyntaxError, ValueError) as e:
        logger.warning("Failed to parse HTML", error=str(e))
        return None
    return tree
