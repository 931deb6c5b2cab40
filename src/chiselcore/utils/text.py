"""
Text normalization and filtering helpers.

Every helper here is pure and safe to call with ``None``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional

from lxml.etree import _Element

from ..constants import MAX_IMAGE_SRC_LENGTH

# Line breaks not preceded by punctuation or markup are soft wraps.
LINES_TRIMMING = re.compile(r"(?<![\.\!\?\:\;,>\"'])\n", flags=re.UNICODE | re.MULTILINE)

# Social buttons and "read more" teasers that leak into content.
RE_FILTER = re.compile(
    r"\W*(Drucken|E-?Mail|Facebook|Flipboard|Google|Instagram|"
    r"Linkedin|Mail|PDF|Pinterest|Pocket|Print|QQ|Reddit|Twitter|"
    r"WeChat|WeiBo|Whatsapp|Xing|Mehr zum Thema:?|More on this.{0,8})$",
    flags=re.IGNORECASE,
)

IMAGE_EXTENSION = re.compile(r"[^\s]+\.(avif|bmp|gif|hei[cf]|jpe?g|png|webp)(\b|$)", flags=re.IGNORECASE)

_SPACE_ENTITIES = (("&#13;", "\r"), ("&#10;", "\n"), ("&nbsp;", " "))


@lru_cache(maxsize=1024)
def _trim(string: str) -> str:
    return " ".join(string.split()).strip()


def trim(string: Optional[str]) -> str:
    """Collapse whitespace runs into single spaces and strip both ends."""
    if not string:
        return ""
    return _trim(string)


def text_chars_test(string: Optional[str]) -> bool:
    """Return True if the string holds at least one non-space character."""
    return bool(string) and not string.isspace()  # type: ignore[union-attr]


def _printable_or_space(char: str) -> str:
    return char if char.isprintable() or char.isspace() else ""


def remove_control_characters(string: Optional[str]) -> str:
    """Drop non-printable characters while keeping all whitespace."""
    if not string:
        return ""
    return "".join(map(_printable_or_space, string))


@lru_cache(maxsize=1024)
def line_processing(line: str, preserve_space: bool = False, trailing_space: bool = False) -> Optional[str]:
    """
    Clean a single line of text.

    Space-like HTML entities are decoded, control characters removed and,
    unless ``preserve_space`` is set, whitespace is collapsed. Returns None
    for lines left empty.
    """
    new_line = line
    for entity, replacement in _SPACE_ENTITIES:
        new_line = new_line.replace(entity, replacement)
    new_line = remove_control_characters(new_line)
    if preserve_space:
        return new_line
    new_line = trim(LINES_TRIMMING.sub(" ", new_line))
    if not new_line:
        return None
    if trailing_space:
        space_before = " " if line[:1].isspace() else ""
        space_after = " " if line[-1:].isspace() else ""
        new_line = f"{space_before}{new_line}{space_after}"
    return new_line


def sanitize(text: Optional[str], preserve_space: bool = False, trailing_space: bool = False) -> str:
    """Clean a block of text line by line, dropping empty lines."""
    if not text:
        return ""
    if trailing_space:
        return line_processing(text, preserve_space, True) or ""
    lines = (line_processing(line, preserve_space) for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def text_filter(element: _Element) -> bool:
    """
    Return True if the element's text should be discarded.

    The element's own text is tested, or its tail when it has no text.
    Empty strings and lines made only of social-media boilerplate fail.
    """
    test_text = element.tail if element.text is None else element.text
    if not text_chars_test(test_text):
        return True
    return any(RE_FILTER.match(line) for line in test_text.splitlines())  # type: ignore[union-attr]


def is_image_file(source: Optional[str]) -> bool:
    """Check if the string looks like a link to an image file."""
    if not source or len(source) > MAX_IMAGE_SRC_LENGTH:
        return False
    return IMAGE_EXTENSION.search(source) is not None


def is_image_element(element: _Element) -> bool:
    """Check if an element carries a usable image source attribute."""
    for attribute in ("data-src", "src"):
        if is_image_file(element.get(attribute, "")):
            return True
    return any(is_image_file(value) for name, value in element.attrib.items() if name.startswith("data-src"))
