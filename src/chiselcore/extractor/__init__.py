"""
ChiselCore Content Extraction Module

Finds the main content of a web page and returns it as a normalized tree:
1. Cleaning: removal of boilerplate tags and conversion to a small tag vocabulary
2. Comments: separate extraction of the user comments section
3. Main pass: tag-specific handlers over the most likely content container
4. Fallbacks: a plain baseline, then a baseline scoped to the content area

Features:
- Paragraphs, headings, lists, quotes, code blocks, tables and images
- Link-density pruning of navigation blocks
- Optional segment deduplication across pages
- Async service with bounded concurrency
"""

from .baseline import baseline, smart_baseline
from .comments import extract_comments
from .context import ExtractionContext
from .core import bare_extraction, extract, resolve_config
from .dispatch import get_handler, handle_text_element
from .main_extractor import extract_content, recover_wild_text
from .models import Document, DocumentMetadata, ExtractionResult, ExtractionStage
from .protocols import Extractor, MetadataProvider
from .service import ContentExtractor

__all__ = [
    "ContentExtractor",
    "Document",
    "DocumentMetadata",
    "ExtractionContext",
    "ExtractionResult",
    "ExtractionStage",
    "Extractor",
    "MetadataProvider",
    "bare_extraction",
    "baseline",
    "extract",
    "extract_comments",
    "extract_content",
    "get_handler",
    "handle_text_element",
    "recover_wild_text",
    "resolve_config",
    "smart_baseline",
]
