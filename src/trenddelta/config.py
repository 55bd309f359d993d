from __future__ import annotations

"""Configuration utilities for trenddelta.

This module defines a hierarchical configuration schema using Pydantic models.
The :class:`Settings` container groups the calendar, query defaults, provider
location, output and logging sections.  Instances can be populated from
environment variables (``TRENDDELTA_<SECTION>__<KEY>``) or from YAML/JSON
files with matching nested keys.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils.timeparse import MONDAY, parse_weekday, resolve_timezone

import yaml


OUTPUT_FORMATS = ("table", "csv", "json", "npz")


class SectionModel(BaseModel):
    """Base model for configuration subsections that ignores unknown fields."""

    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------------
# Settings schema
# ---------------------------------------------------------------------------


class CalendarSettings(SectionModel):
    """Local calendar used to align interval boundaries."""

    timezone: str | None = None
    first_day_of_week: int = MONDAY

    @field_validator("timezone", mode="before")
    @classmethod
    def _check_timezone(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        resolve_timezone(text)
        return text

    @field_validator("first_day_of_week", mode="before")
    @classmethod
    def _coerce_weekday(cls, value: Any) -> Any:
        return parse_weekday(value)

    def tzinfo(self):
        return resolve_timezone(self.timezone)


class QuerySettings(SectionModel):
    """Default selections used when a query does not name them."""

    time_range: str = "All time"
    interval: str = "Day"


class ProviderSettings(SectionModel):
    """Location of exported trend files."""

    root: str = "."
    filename: str = "{dma_id}-{element_id}-{parameter_id}.csv"
    value_column: str | None = None


class OutputSettings(SectionModel):
    """Result rendering."""

    format: str = "table"
    path: str | None = None

    @field_validator("format", mode="before")
    @classmethod
    def _check_format(cls, value: Any) -> Any:
        name = str(value).strip().lower()
        if name not in OUTPUT_FORMATS:
            raise ValueError(f"format must be one of {', '.join(OUTPUT_FORMATS)}, got {value!r}")
        return name


class LoggingSettings(SectionModel):
    """Log level of the ``trenddelta`` logger."""

    level: str = "WARNING"

    @field_validator("level", mode="before")
    @classmethod
    def _check_level(cls, value: Any) -> Any:
        if isinstance(value, int):
            return logging.getLevelName(value)
        name = str(value).strip().upper()
        if name not in logging._nameToLevel:
            raise ValueError(f"unknown log level: {value!r}")
        return name


class Settings(BaseSettings):
    """Container for all runtime configuration sections."""

    calendar: CalendarSettings = Field(default_factory=CalendarSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="TRENDDELTA_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables and defaults only."""

        return cls()


# ---------------------------------------------------------------------------
# Loading utilities
# ---------------------------------------------------------------------------


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON or YAML file."""

    p = Path(path)
    text = p.read_text()
    if p.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError("Configuration file must define a mapping")
    return Settings.model_validate(data)
