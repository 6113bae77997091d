"""Tunable thresholds and defaults for report synthesis."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

DEFAULT_SCENARIO_POOL = [
    "Navigate Dashboard Tabs",
    "Test Dashboard Input Controls",
    "Test Dashboard Plot Interactions",
    "Test Dashboard Responsiveness",
]


class SettingsError(ValueError):
    """Raised when a settings file cannot be turned into ReportSettings."""


class RecommendationThresholds(BaseModel):
    """Limits used when deriving advisory recommendations."""

    max_load_time: float = 3000
    max_average_response_time: float = 1000
    timeout_keywords: list[str] = Field(default_factory=lambda: ["timeout"])
    missing_element_keywords: list[str] = Field(default_factory=lambda: ["not found", "selector"])


class ReportSettings(BaseModel):
    """Defaults applied whenever the log does not carry a value."""

    title: str = "Shiny Dashboard Test Report"
    min_log_length: int = Field(default=300, ge=0)
    placeholder_duration: float = Field(default=5000, ge=0)
    default_load_time: float = Field(default=3000, ge=0)
    default_average_response_time: float = Field(default=500, ge=0)
    default_user_agent: str = "Automated Test Runner"
    default_viewport: str = "1920x1080"
    scenario_pool: list[str] = Field(default_factory=lambda: list(DEFAULT_SCENARIO_POOL), min_length=1)
    thresholds: RecommendationThresholds = Field(default_factory=RecommendationThresholds)


def load_settings(path: Path | None) -> ReportSettings:
    """Load settings from an optional YAML/JSON file layered over the defaults."""

    if path is None:
        return ReportSettings()
    if not path.exists():
        raise SettingsError(f"Settings file {path} not found")
    raw: Any = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise SettingsError(f"Settings file {path} must contain a mapping")
    try:
        return ReportSettings.model_validate(raw)
    except ValidationError as exc:
        raise SettingsError(f"Settings file {path} is invalid: {exc}") from exc
