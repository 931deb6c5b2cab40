"""
Asynchronous extraction service for ChiselCore.

Runs the synchronous extraction pipeline in a thread pool so an event loop
can process many pages concurrently.
"""

from __future__ import annotations

import asyncio
import time
from typing import Dict, Iterable, List, Optional, Tuple

import structlog
from structlog.contextvars import bound_contextvars

from ..config.config import DedupSettings, ExtractorConfig, ServiceSettings, Settings
from ..dedup.cache import DedupCache, get_shared_cache
from ..utils.html import load_html
from .core import bare_extraction
from .models import Document, DocumentMetadata, ExtractionStage
from .protocols import Extractor, MetadataProvider

logger = structlog.get_logger(__name__)


class ContentExtractor(Extractor):
    """
    Extracts the main content of HTML pages.

    Features:
    - Non-blocking extraction on the default executor
    - Bounded concurrency for batches
    - Per-run or process-wide deduplication
    - Per-stage success statistics
    """

    name = "chisel"

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        dedup: Optional[DedupSettings] = None,
        service: Optional[ServiceSettings] = None,
        metadata_provider: Optional[MetadataProvider] = None,
    ) -> None:
        self.config = config or ExtractorConfig()
        self.dedup = dedup or DedupSettings()
        self.service = service or ServiceSettings()
        self.metadata_provider = metadata_provider
        self.logger = logger.bind(component="ContentExtractor")

        self._stats: Dict[str, float] = {stage.value: 0 for stage in ExtractionStage}
        self._stats.update({"attempts": 0, "failures": 0, "errors": 0, "total_time": 0.0})

    @classmethod
    def from_settings(cls, settings: Settings, metadata_provider: Optional[MetadataProvider] = None) -> ContentExtractor:
        """Build an extractor from loaded application settings."""
        return cls(
            config=settings.extraction,
            dedup=settings.dedup,
            service=settings.service,
            metadata_provider=metadata_provider,
        )

    def _dedup_cache(self) -> Optional[DedupCache]:
        if not self.config.dedup:
            return None
        if self.dedup.scope == "shared":
            return get_shared_cache(self.dedup.capacity, self.dedup.min_length, self.dedup.ttl_seconds)
        return DedupCache(self.dedup.capacity, self.dedup.min_length)

    def extract_sync(self, html: str, url: str | None = None) -> Optional[Document]:
        """Synchronous extraction of one page."""
        config = self.config if url is None else self.config.model_copy(update={"url": url})
        tree = load_html(html)
        if tree is None:
            self.logger.warning("Empty HTML or parsing failed", url=url)
            return None

        if self.metadata_provider is not None:
            metadata = self.metadata_provider(tree, url)
        else:
            metadata = DocumentMetadata(url=config.url)

        with bound_contextvars(document_url=url):
            return bare_extraction(tree, config, metadata=metadata, dedup_cache=self._dedup_cache())

    async def extract(self, html: str, *, url: str | None = None) -> Optional[Document]:
        """Extract content without blocking the event loop.

        Args:
            html: HTML content to extract from
            url: Optional URL for resolving links and for logging

        Returns:
            Document, or None when extraction failed
        """
        start_time = time.time()
        self._stats["attempts"] += 1
        try:
            loop = asyncio.get_running_loop()
            document = await loop.run_in_executor(None, self.extract_sync, html, url)
        except Exception as e:
            self._stats["errors"] += 1
            self.logger.error(
                "Extractor failed",
                event_type="extractor_failed",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
        finally:
            self._stats["total_time"] += time.time() - start_time

        if document is None:
            self._stats["failures"] += 1
            self.logger.debug("No content extracted", url=url)
            return None

        self._stats[document.stage.value] += 1
        self.logger.info(
            "Extraction completed",
            url=url,
            stage=document.stage.value,
            text_length=document.length,
            has_comments=bool(document.comments),
        )
        return document

    async def extract_many(self, pages: Iterable[Tuple[str, Optional[str]]]) -> List[Optional[Document]]:
        """
        Extract a batch of ``(html, url)`` pages, at most ``max_concurrency`` at a time.

        Results keep the order of the input.
        """
        semaphore = asyncio.Semaphore(self.service.max_concurrency)

        async def _bounded(html: str, url: Optional[str]) -> Optional[Document]:
            async with semaphore:
                return await self.extract(html, url=url)

        return await asyncio.gather(*(_bounded(html, url) for html, url in pages))

    def get_metrics(self) -> Dict[str, float]:
        """
        Get extraction statistics.

        Returns:
            Counts per stage, failures and errors, with timing
        """
        metrics = dict(self._stats)
        attempts = metrics["attempts"]
        successes = sum(metrics[stage.value] for stage in ExtractionStage)
        metrics["success_rate"] = successes / attempts if attempts > 0 else 0.0
        metrics["avg_time"] = metrics["total_time"] / attempts if attempts > 0 else 0.0
        return metrics
