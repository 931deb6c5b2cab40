"""Configuration models and loaders."""

from .config import (
    DedupSettings,
    ExtractorConfig,
    MonitoringConfig,
    ServiceSettings,
    Settings,
    find_config_file,
    settings,
)

__all__ = [
    "DedupSettings",
    "ExtractorConfig",
    "MonitoringConfig",
    "ServiceSettings",
    "Settings",
    "find_config_file",
    "settings",
]
