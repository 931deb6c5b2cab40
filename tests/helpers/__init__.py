"""Shared test helpers."""

from .metric_delta import histogram_observes, metric_delta
from .pages import BOILERPLATE, PARAGRAPH_ONE, PARAGRAPH_TWO

__all__ = ["BOILERPLATE", "PARAGRAPH_ONE", "PARAGRAPH_TWO", "histogram_observes", "metric_delta"]
