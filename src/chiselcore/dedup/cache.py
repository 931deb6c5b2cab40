"""
Bounded LRU cache of text fingerprints for dropping repeated fragments.

The cache works at the level of single text segments, not documents: it
catches boilerplate such as "Subscribe to our newsletter" appearing several
times on a page. Fingerprints are MurmurHash3 digests of the whitespace
normalized text.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Optional

import mmh3
import structlog
from lxml.etree import _Element

from ..constants import DEDUP_CAPACITY, DEDUP_MIN_LENGTH
from ..observability.metrics import METRICS
from ..utils.text import trim
from ..utils.tree import text_content

logger = structlog.get_logger(__name__)


def fingerprint(text: str) -> int:
    """128-bit MurmurHash3 of the normalized text."""
    return mmh3.hash128(trim(text), signed=False)


@dataclass(slots=True)
class CacheStats:
    """Counters describing cache activity."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    skipped: int = 0


class DedupCache:
    """
    LRU store of fingerprints answering "have I seen this text before?".

    A hit does not refresh the entry: an often-repeated fragment still ages
    out once enough new text has been seen. Text shorter than ``min_length``
    is never fingerprinted.
    """

    def __init__(
        self,
        capacity: int = DEDUP_CAPACITY,
        min_length: int = DEDUP_MIN_LENGTH,
        ttl_seconds: Optional[float] = None,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.min_length = min_length
        self.ttl_seconds = ttl_seconds
        self._entries: OrderedDict[int, float] = OrderedDict()
        self._lock = threading.Lock()
        self._stats = CacheStats()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, text: str) -> bool:
        return fingerprint(text) in self._entries

    def is_duplicate(self, text: Optional[str]) -> bool:
        """
        Check a text segment and register it on first sight.

        Returns True if the segment was already seen, False otherwise.
        """
        normalized = trim(text)
        if len(normalized) < self.min_length:
            self._stats.skipped += 1
            return False

        key = fingerprint(normalized)
        now = time.monotonic()
        with self._lock:
            seen_at = self._entries.get(key)
            if seen_at is not None and not self._expired(seen_at, now):
                self._stats.hits += 1
                return True
            if seen_at is not None:
                del self._entries[key]
            elif len(self._entries) >= self.capacity:
                self._entries.popitem(last=False)
                self._stats.evictions += 1
            self._entries[key] = now
            self._stats.misses += 1
        return False

    def _expired(self, seen_at: float, now: float) -> bool:
        return self.ttl_seconds is not None and now - seen_at > self.ttl_seconds

    def clear(self) -> None:
        """Forget every fingerprint and reset the counters."""
        with self._lock:
            self._entries.clear()
            self._stats = CacheStats()

    def copy(self) -> DedupCache:
        """Independent cache holding the same fingerprints."""
        other = DedupCache(self.capacity, self.min_length, self.ttl_seconds)
        with self._lock:
            other._entries = OrderedDict(self._entries)
        return other

    def get_stats(self) -> Dict[str, int]:
        """Get cache statistics."""
        return {
            "size": len(self._entries),
            "capacity": self.capacity,
            "hits": self._stats.hits,
            "misses": self._stats.misses,
            "evictions": self._stats.evictions,
            "skipped": self._stats.skipped,
        }


def duplicate_test(element: _Element, cache: DedupCache) -> bool:
    """Check the full text of an element against the cache."""
    duplicate = cache.is_duplicate(text_content(element))
    if duplicate:
        METRICS["dedup_hits"].inc()
        logger.debug("Discarding duplicate segment", tag=element.tag)
    return duplicate


# --- Process-wide cache ---

_shared_cache: Optional[DedupCache] = None
_shared_lock = threading.Lock()


def get_shared_cache(
    capacity: int = DEDUP_CAPACITY,
    min_length: int = DEDUP_MIN_LENGTH,
    ttl_seconds: Optional[float] = None,
) -> DedupCache:
    """
    Return the cache shared by every extraction in this process.

    The parameters only apply when the cache is first created.
    """
    global _shared_cache
    with _shared_lock:
        if _shared_cache is None:
            _shared_cache = DedupCache(capacity, min_length, ttl_seconds)
            logger.info("Created shared dedup cache", capacity=capacity, ttl_seconds=ttl_seconds)
        return _shared_cache


def reset_shared_cache() -> None:
    """Drop the process-wide cache."""
    global _shared_cache
    with _shared_lock:
        _shared_cache = None
