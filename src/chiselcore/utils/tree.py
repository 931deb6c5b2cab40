"""
Tree primitives on top of lxml.

lxml keeps trailing text in the ``tail`` slot of the preceding element, so
any structural edit has to move tails explicitly or the text is lost.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from lxml import etree
from lxml.etree import _Element

from ..constants import OUTPUT_ATTRIBUTES, OUTPUT_TAGS
from .text import text_chars_test


def delete_element(element: _Element, keep_tail: bool = True) -> None:
    """
    Remove an element from its parent.

    With ``keep_tail`` the trailing text is re-attached to the previous
    sibling's tail, or to the parent's text when there is no previous sibling.
    """
    parent = element.getparent()
    if parent is None:
        return
    if keep_tail and element.tail:
        previous = element.getprevious()
        if previous is None:
            parent.text = (parent.text or "") + element.tail
        else:
            previous.tail = (previous.tail or "") + element.tail
    parent.remove(element)


def join_text(first: Optional[str], second: Optional[str]) -> Optional[str]:
    """Concatenate two text runs, inserting a space where both sides touch words."""
    if not first:
        return second
    if not second:
        return first
    if first[-1].isspace() or second[0].isspace():
        return first + second
    return f"{first} {second}"


def append_text(element: _Element, text: Optional[str]) -> None:
    """Append a text run after the last piece of content inside ``element``."""
    if not text_chars_test(text):
        return
    if len(element) > 0:
        last = element[-1]
        last.tail = join_text(last.tail, text)
    else:
        element.text = join_text(element.text, text)


def strip_trailing_space(element: _Element) -> None:
    """Remove whitespace after the last word inside ``element``, leaving its tail alone."""
    current = element
    while len(current) > 0:
        last = current[-1]
        if last.tail and last.tail.strip():
            last.tail = last.tail.rstrip()
            return
        last.tail = None
        current = last
    if current.text:
        current.text = current.text.rstrip() or None


def copy_attributes(destination: _Element, source: _Element, names: Optional[Iterable[str]] = None) -> None:
    """Copy all attributes, or only the given ones, from source to destination."""
    if names is None:
        for key, value in source.attrib.items():
            destination.set(key, value)
        return
    for key in names:
        value = source.get(key)
        if value is not None:
            destination.set(key, value)


def shallow_copy(element: _Element, with_tail: bool = True) -> _Element:
    """Build a detached copy of an element without its children."""
    clone = etree.Element(element.tag)
    copy_attributes(clone, element)
    clone.text = element.text
    if with_tail:
        clone.tail = element.tail
    return clone


def text_content(element: _Element) -> str:
    """Full text of an element and its descendants, without its own tail."""
    return "".join(element.itertext())


def finalize_output(body: _Element) -> _Element:
    """
    Strip every tag outside the output vocabulary, keeping its content,
    and drop attributes that carry no meaning in the output.
    """
    stray = {element.tag for element in body.iterdescendants() if element.tag not in OUTPUT_TAGS}
    if stray:
        etree.strip_tags(body, *stray)
    for element in body.iter():
        for name in [name for name in element.attrib if name not in OUTPUT_ATTRIBUTES]:
            del element.attrib[name]
    return body


# Elements rendered on their own line in plain text.
BLOCK_TAGS = frozenset({"code", "graphic", "head", "item", "list", "p", "quote", "row", "table"})


def _collect_text(element: _Element, parts: List[str]) -> None:
    block = element.tag in BLOCK_TAGS
    if block:
        parts.append("\n")
    elif element.tag == "cell":
        parts.append(" ")
    if element.text:
        parts.append(element.text)
    for child in element:
        _collect_text(child, parts)
    if block:
        parts.append("\n")
    elif element.tag == "lb":
        parts.append("\n")
    if element.tail:
        parts.append(element.tail)


def render_text(body: _Element) -> str:
    """Plain text of an output tree, one line per block element."""
    parts: List[str] = []
    if body.text:
        parts.append(body.text)
    for child in body:
        _collect_text(child, parts)
    return "".join(parts)
