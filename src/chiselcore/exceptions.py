"""
Exceptions raised by ChiselCore.

Rejecting content is never an error: handlers return None and the
orchestrator returns None when every stage falls short. Exceptions are
reserved for misuse of the public API.
"""

from __future__ import annotations


class ChiselError(Exception):
    """Base class for all ChiselCore errors."""


class ParseError(ChiselError, ValueError):
    """Raised when input markup cannot be turned into a tree."""


class ConfigError(ChiselError, ValueError):
    """Raised when extraction options are unknown or invalid."""
