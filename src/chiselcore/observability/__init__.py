"""Logging and metrics for ChiselCore."""

from __future__ import annotations

from .logging import configure_logging
from .metrics import METRICS

__all__ = ["configure_logging", "METRICS"]
