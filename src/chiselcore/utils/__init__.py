"""Utility modules for ChiselCore."""

from .html import load_html
from .text import sanitize, text_chars_test, text_filter, trim
from .tree import delete_element, finalize_output

__all__ = [
    "delete_element",
    "finalize_output",
    "load_html",
    "sanitize",
    "text_chars_test",
    "text_filter",
    "trim",
]
