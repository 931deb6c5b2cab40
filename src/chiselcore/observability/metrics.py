"""
Prometheus metrics for the extraction pipeline.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        # Counters register under their name without the _total suffix
        existing = _PROM_REGISTRY._names_to_collectors.get(name) or _PROM_REGISTRY._names_to_collectors.get(
            name.removesuffix("_total")
        )
        if existing is not None:
            return existing
        try:
            return metric_cls(name, documentation, *args, **kwargs)
        except ValueError:
            return _PROM_REGISTRY._names_to_collectors[name]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)
Histogram = _duplicate_safe_factory(_OrigHistogram)

METRICS: Dict[str, Any] = {
    "extractions": Counter(
        "chiselcore_extractions_total",
        "Documents accepted, by the stage that produced them",
        ["stage"],
    ),
    "extraction_failures": Counter(
        "chiselcore_extraction_failures_total",
        "Documents for which every stage produced too little text",
    ),
    "dedup_hits": Counter(
        "chiselcore_dedup_hits_total",
        "Text segments dropped as duplicates",
    ),
    "extraction_duration": Histogram(
        "chiselcore_extraction_duration_seconds",
        "Time spent extracting one document",
        buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
    ),
}
