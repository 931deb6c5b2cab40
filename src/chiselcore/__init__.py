"""
ChiselCore - Main content extraction from HTML pages.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import ExtractorConfig, Settings
from .dedup import DedupCache
from .exceptions import ChiselError, ConfigError, ParseError
from .extractor import (
    ContentExtractor,
    Document,
    DocumentMetadata,
    ExtractionStage,
    bare_extraction,
    baseline,
    extract,
)
from .utils import load_html

__all__ = [
    "__version__",
    "ChiselError",
    "ConfigError",
    "ContentExtractor",
    "DedupCache",
    "Document",
    "DocumentMetadata",
    "ExtractionStage",
    "ExtractorConfig",
    "ParseError",
    "Settings",
    "bare_extraction",
    "baseline",
    "extract",
    "load_html",
]
