"""
Extraction orchestrator: cleaning, comments, main pass and fallbacks.
"""

from __future__ import annotations

import time
from copy import deepcopy
from typing import Any, Optional, Tuple, Union

import structlog
from lxml.etree import _Element
from pydantic import ValidationError

from ..config.config import ExtractorConfig
from ..dedup.cache import DedupCache, fingerprint
from ..exceptions import ConfigError, ParseError
from ..observability.metrics import METRICS
from ..processing.cleaning import prune_unwanted_nodes, tree_cleaning
from ..processing.convert import convert_tags
from ..processing.xpaths import REMOVE_COMMENTS_XPATH
from ..utils.html import load_html
from .baseline import baseline, smart_baseline
from .comments import extract_comments
from .context import ExtractionContext
from .main_extractor import extract_content
from .models import Document, DocumentMetadata, ExtractionResult, ExtractionStage

logger = structlog.get_logger(__name__)


def resolve_config(config: Optional[ExtractorConfig] = None, **overrides: Any) -> ExtractorConfig:
    """Merge keyword overrides into a configuration, rejecting unknown options."""
    config = config or ExtractorConfig()
    if not overrides:
        return config
    unknown = set(overrides) - set(ExtractorConfig.model_fields)
    if unknown:
        raise ConfigError(f"Unknown extraction options: {', '.join(sorted(unknown))}")
    try:
        return ExtractorConfig.model_validate({**config.model_dump(), **overrides})
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def _run_stages(
    cleaned: _Element, pristine: _Element, ctx: ExtractionContext
) -> Tuple[ExtractionStage, Optional[ExtractionResult]]:
    """Walk the fallback chain and return the first stage yielding enough text."""
    config = ctx.config
    min_size = config.min_extracted_size

    if config.fast:
        stage, result = ExtractionStage.BASELINE, baseline(pristine)
    else:
        stage, result = ExtractionStage.MAIN, extract_content(cleaned, ctx)
        if result.length >= min_size or config.favor_precision:
            return stage, result
        if not config.no_fallback:
            logger.debug("Main extraction too short, trying baseline", length=result.length)
            stage, result = ExtractionStage.BASELINE, baseline(pristine)

    if result.length < min_size and not config.no_fallback:
        logger.debug("Baseline too short, trying smart baseline", length=result.length)
        stage, result = ExtractionStage.SMART_BASELINE, smart_baseline(pristine)

    if result.length < min_size:
        return stage, None
    return stage, result


def bare_extraction(
    tree: _Element,
    config: Optional[ExtractorConfig] = None,
    metadata: Optional[DocumentMetadata] = None,
    dedup_cache: Optional[DedupCache] = None,
) -> Optional[Document]:
    """
    Extract the main content and comments of a parsed page.

    The input tree is left untouched. Returns None when no stage produced
    enough text.
    """
    config = config or ExtractorConfig()
    start_time = time.perf_counter()
    ctx = ExtractionContext(config=config, dedup=dedup_cache)
    log = logger.bind(url=config.url)

    cleaned = convert_tags(tree_cleaning(deepcopy(tree), config), config)
    log.debug("Tree cleaned and converted")

    comments: Optional[ExtractionResult] = None
    if config.comments:
        comments = extract_comments(cleaned, ctx)
        if comments.length < config.min_extracted_comment_size:
            comments = None
    if config.favor_precision:
        cleaned = prune_unwanted_nodes(cleaned, REMOVE_COMMENTS_XPATH)

    stage, result = _run_stages(cleaned, tree, ctx)
    METRICS["extraction_duration"].observe(time.perf_counter() - start_time)

    if result is None or result.length < config.min_output_size:
        METRICS["extraction_failures"].inc()
        log.warning("Extraction failed", stage=stage.value)
        return None

    METRICS["extractions"].labels(stage=stage.value).inc()
    log.debug("Extraction accepted", stage=stage.value, length=result.length)

    if metadata is None:
        metadata = DocumentMetadata(url=config.url)
    return Document(
        body=result.body,
        text=result.text,
        stage=stage,
        commentsbody=comments.body if comments is not None else None,
        comments=comments.text if comments is not None else "",
        metadata=metadata,
        fingerprint=fingerprint(result.text),
    )


def extract(
    html: Union[str, bytes, _Element, None],
    config: Optional[ExtractorConfig] = None,
    *,
    metadata: Optional[DocumentMetadata] = None,
    dedup_cache: Optional[DedupCache] = None,
    raise_on_error: bool = False,
    **overrides: Any,
) -> Optional[Document]:
    """
    Parse a page and extract its main content.

    Keyword overrides are merged into the configuration, so
    ``extract(html, focus="recall", images=True)`` works without building
    an ExtractorConfig. Unparsable input returns None, or raises
    ParseError with ``raise_on_error``.
    """
    config = resolve_config(config, **overrides)
    tree = load_html(html)
    if tree is None:
        if raise_on_error:
            raise ParseError("Empty or unparsable HTML input")
        logger.warning("Empty HTML or parsing failed", url=config.url)
        return None
    return bare_extraction(tree, config, metadata=metadata, dedup_cache=dedup_cache)
