"""
Image handling.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin

import structlog
from lxml import etree
from lxml.etree import _Element

from ..utils.text import is_image_file
from .context import ExtractionContext

logger = structlog.get_logger(__name__)

PROTOCOL_RELATIVE = re.compile(r"^//")


def _image_source(element: _Element) -> Optional[str]:
    for attribute in ("data-src", "src"):
        source = element.get(attribute, "")
        if is_image_file(source):
            return source
    for name, value in element.attrib.items():
        if name.startswith("data-src") and is_image_file(value):
            return value
    return None


def handle_image(element: Optional[_Element], ctx: ExtractionContext) -> Optional[_Element]:
    """Build a graphic element from an image source, or None without a usable source."""
    if element is None:
        return None
    ctx.mark(element)

    source = _image_source(element)
    if source is None:
        logger.debug("Discarding image without source", attributes=dict(element.attrib))
        return None

    if not source.startswith("http"):
        if ctx.config.url:
            source = urljoin(ctx.config.url, source)
        else:
            source = PROTOCOL_RELATIVE.sub("http://", source)

    graphic = etree.Element("graphic")
    graphic.set("src", source)
    for attribute in ("alt", "title"):
        value = element.get(attribute)
        if value:
            graphic.set(attribute, value)
    if element.tail:
        graphic.tail = element.tail
    return graphic
