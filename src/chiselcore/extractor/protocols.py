"""
Protocols for pluggable extraction services and metadata providers.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from lxml.etree import _Element

from .models import Document, DocumentMetadata


@runtime_checkable
class Extractor(Protocol):
    """Pluggable HTML-to-Document strategy."""

    name: str

    async def extract(self, html: str, *, url: str | None = None) -> Optional[Document]:
        """Extract content from HTML string.

        Args:
            html: HTML content to extract from
            url: Optional URL for context

        Returns:
            Document with extracted content, or None when nothing usable was found
        """
        ...


@runtime_checkable
class MetadataProvider(Protocol):
    """Supplies page metadata from the parsed tree; title, author, dates and so on."""

    def __call__(self, tree: _Element, url: Optional[str]) -> DocumentMetadata: ...
