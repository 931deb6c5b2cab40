"""
Per-run extraction state shared by all handlers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Set

from lxml.etree import _Element

from ..config.config import ExtractorConfig
from ..dedup.cache import DedupCache, duplicate_test


@dataclass
class ExtractionContext:
    """
    Configuration, dedup cache and processed markers of one extraction run.

    Source elements consumed by a handler are recorded in ``processed`` and
    never removed from it, so later sweeps over the same tree skip them.
    The set keeps the element proxies alive, which keeps their identity
    stable for the whole run.
    """

    config: ExtractorConfig
    dedup: Optional[DedupCache] = None
    processed: Set[_Element] = field(default_factory=set)

    def __post_init__(self) -> None:
        if self.config.dedup and self.dedup is None:
            self.dedup = DedupCache()

    def is_processed(self, element: _Element) -> bool:
        return element in self.processed

    def mark(self, element: _Element) -> None:
        self.processed.add(element)

    def mark_subtree(self, element: _Element) -> None:
        """Mark an element and all of its descendants."""
        self.processed.update(element.iter())

    def is_duplicate(self, element: _Element) -> bool:
        """Run the dedup test when deduplication is enabled."""
        if not self.config.dedup or self.dedup is None:
            return False
        return duplicate_test(element, self.dedup)
