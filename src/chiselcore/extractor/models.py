"""
Data models for extraction results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from lxml.etree import _Element

from ..utils.text import sanitize
from ..utils.tree import render_text


class ExtractionStage(str, Enum):
    """Stage of the fallback chain that produced a document."""

    MAIN = "main"
    BASELINE = "baseline"
    SMART_BASELINE = "smart_baseline"


@dataclass(slots=True, frozen=True)
class ExtractionResult:
    """Output tree of one extraction pass with its plain text."""

    body: _Element
    text: str
    length: int

    def __post_init__(self) -> None:
        """Validate the result."""
        if self.body.tag != "body":
            raise ValueError("Result tree must be rooted at a body element")
        if self.length != len(self.text):
            raise ValueError("Length must match the extracted text")

    @classmethod
    def from_body(cls, body: _Element) -> ExtractionResult:
        """Build a result from a finished output tree."""
        text = sanitize(render_text(body))
        return cls(body=body, text=text, length=len(text))


@dataclass(slots=True, frozen=True)
class DocumentMetadata:
    """Metadata supplied by an external metadata extractor."""

    title: Optional[str] = None
    author: Optional[str] = None
    url: Optional[str] = None
    hostname: Optional[str] = None
    description: Optional[str] = None
    sitename: Optional[str] = None
    date: Optional[str] = None
    categories: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    language: Optional[str] = None
    image: Optional[str] = None
    pagetype: Optional[str] = None
    license: Optional[str] = None


@dataclass(slots=True, frozen=True)
class Document:
    """Extracted main content and comments of one page."""

    body: _Element
    text: str
    stage: ExtractionStage
    commentsbody: Optional[_Element] = None
    comments: str = ""
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    fingerprint: Optional[int] = None

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def title(self) -> Optional[str]:
        return self.metadata.title

    @property
    def url(self) -> Optional[str]:
        return self.metadata.url
