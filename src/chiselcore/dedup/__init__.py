"""
Segment-level deduplication for ChiselCore.

A bounded LRU of MurmurHash3 fingerprints, owned per extraction run by
default, or shared process-wide on request.
"""

from .cache import DedupCache, duplicate_test, fingerprint, get_shared_cache, reset_shared_cache

__all__ = [
    "DedupCache",
    "duplicate_test",
    "fingerprint",
    "get_shared_cache",
    "reset_shared_cache",
]
