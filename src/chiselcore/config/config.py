"""
Configuration management for ChiselCore using Pydantic.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, ClassVar, Literal, Optional, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import (
    DEDUP_CAPACITY,
    DEDUP_MIN_LENGTH,
    MIN_EXTRACTED_COMM_SIZE,
    MIN_EXTRACTED_SIZE,
    MIN_OUTPUT_SIZE,
)

# --- Setup Logging ---
log = logging.getLogger(__name__)

Focus = Literal["precision", "balanced", "recall"]

LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"})

# --- Nested Configuration Models ---


class ExtractorConfig(BaseModel):
    """Immutable options for one extraction run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    focus: Focus = Field(default="balanced", description="Favor precision, recall, or neither.")
    tables: bool = Field(default=True, description="Keep tables in the output.")
    images: bool = Field(default=False, description="Keep images in the output.")
    formatting: bool = Field(default=False, description="Keep inline formatting as hi elements.")
    links: bool = Field(default=False, description="Keep links as ref elements with their targets.")
    comments: bool = Field(default=True, description="Extract the comment section separately.")
    dedup: bool = Field(default=False, description="Drop text segments already seen.")
    fast: bool = Field(default=False, description="Skip the structured pipeline and use the baseline directly.")
    no_fallback: bool = Field(default=False, description="Disable the baseline fallback stages.")
    min_extracted_size: int = Field(
        default=MIN_EXTRACTED_SIZE, ge=0, description="Minimum body length before falling back."
    )
    min_extracted_comment_size: int = Field(
        default=MIN_EXTRACTED_COMM_SIZE, ge=0, description="Minimum comments length to keep them."
    )
    min_output_size: int = Field(default=MIN_OUTPUT_SIZE, ge=0, description="Absolute minimum of any result.")
    url: Optional[str] = Field(default=None, description="Base URL for resolving relative links and images.")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank URLs as missing."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def favor_precision(self) -> bool:
        return self.focus == "precision"

    @property
    def favor_recall(self) -> bool:
        return self.focus == "recall"


class DedupSettings(BaseModel):
    """Configuration for the segment deduplication cache."""

    capacity: int = Field(default=DEDUP_CAPACITY, ge=1, description="Maximum number of fingerprints kept.")
    min_length: int = Field(default=DEDUP_MIN_LENGTH, ge=1, description="Shorter segments are never checked.")
    scope: Literal["run", "shared"] = Field(
        default="run", description="One cache per extraction run, or one per process."
    )
    ttl_seconds: Optional[float] = Field(default=None, gt=0, description="Expiry for shared fingerprints.")


class ServiceSettings(BaseModel):
    """Configuration for the asynchronous extraction service."""

    max_concurrency: int = Field(default=4, ge=1, description="Documents extracted at the same time.")


class MonitoringConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: Optional[str] = Field(default=None, description="Path to log file. If None, logs to console.")
    json_logs: bool = Field(default=False, description="Render console logs as JSON.")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Settings(BaseSettings):
    project_name: str = "ChiselCore"
    extraction: ExtractorConfig = Field(default_factory=ExtractorConfig)
    dedup: DedupSettings = Field(default_factory=DedupSettings)
    service: ServiceSettings = Field(default_factory=ServiceSettings)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="CHISEL_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Settings:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for name in ("chisel.yaml", "chisel.yml", "config.yaml", "config.yml"):
        path = current_dir / name
        if path.exists():
            return path
    return None


# --- Lazy Configuration Loader ---


class LazySettings:
    """
    A proxy for the Settings object that delays its loading and validation
    until an attribute is first accessed.
    """

    _settings: ClassVar[Settings | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __getattr__(self, name: str) -> Any:
        if self.__class__._settings is None:
            with self.__class__._lock:
                if self.__class__._settings is None:
                    self.__class__._settings = self._load_with_fallback()
        return getattr(self.__class__._settings, name)

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded settings so the next access reloads them."""
        with cls._lock:
            cls._settings = None

    def _load_with_fallback(self) -> Settings:
        """Load settings from file or fall back to defaults."""
        config_path = find_config_file()
        if config_path:
            try:
                log.info("Lazy loading configuration from: %s", config_path)
                return Settings.from_yaml(config_path)
            except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
                log.error(
                    "Failed to load or validate configuration from '%s': %s. Falling back to default settings.",
                    config_path,
                    e,
                )
        else:
            log.info("No config file found. Using default settings for lazy load.")

        try:
            return Settings()
        except ValidationError as e:
            log.critical("FATAL: Default configuration is invalid: %s", e, exc_info=True)
            raise RuntimeError(f"Default configuration is invalid, cannot start: {e}") from e


# --- Global Settings Instance ---
settings: "Settings" = cast("Settings", LazySettings())
