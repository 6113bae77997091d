"""Performance metric and error collection."""

from __future__ import annotations

import re
from datetime import datetime
from statistics import fmean
from typing import Callable, Optional

from pydantic import BaseModel, Field

from .models import ErrorRecord, ReportMetrics, ScenarioResult, utc_now
from .settings import ReportSettings

_LOAD_TIME_PATTERN = re.compile(r"Initial load time:\s*(?P<value>\d+(?:\.\d+)?)\s*ms", re.IGNORECASE)
_RESPONSE_TIME_PATTERN = re.compile(r"Average response time:\s*(?P<value>\d+(?:\.\d+)?)\s*ms", re.IGNORECASE)
_ERROR_PATTERN = re.compile(r"Error:|failed:", re.IGNORECASE)

UNKNOWN_SCENARIO = "Unknown"


class MetricHints(BaseModel):
    """Metrics supplied directly by the execution side, bypassing the log."""

    load_time: Optional[float] = Field(default=None, ge=0)
    average_response_time: Optional[float] = Field(default=None, ge=0)
    errors: list[ErrorRecord] = Field(default_factory=list)


class MetricsAggregator:
    """Merges external metrics with values read from the log.

    A field set by an earlier ``merge`` is never overwritten, so external
    values always win over log-derived ones. ``collect`` only fills what is
    still unset.
    """

    def __init__(
        self,
        settings: ReportSettings | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._settings = settings or ReportSettings()
        self._clock = clock
        self._load_time: Optional[float] = None
        self._average_response_time: Optional[float] = None
        self._errors: list[ErrorRecord] = []

    def merge(self, hints: MetricHints | None) -> "MetricsAggregator":
        if hints is None:
            return self
        if self._load_time is None and hints.load_time is not None:
            self._load_time = hints.load_time
        if self._average_response_time is None and hints.average_response_time is not None:
            self._average_response_time = hints.average_response_time
        self._errors.extend(error.model_copy() for error in hints.errors)
        return self

    def collect(self, log_text: Optional[str], scenarios: list[ScenarioResult]) -> "MetricsAggregator":
        if not log_text or not log_text.strip():
            if self._load_time is None:
                self._load_time = 0
            if self._average_response_time is None:
                self._average_response_time = 0
            return self

        if self._load_time is None:
            self._load_time = _read_ms(_LOAD_TIME_PATTERN, log_text)
            if self._load_time is None:
                self._load_time = self._settings.default_load_time

        if self._average_response_time is None:
            self._average_response_time = _read_ms(_RESPONSE_TIME_PATTERN, log_text)
            if self._average_response_time is None:
                self._average_response_time = _mean_duration(scenarios)
            if self._average_response_time is None:
                self._average_response_time = self._settings.default_average_response_time

        self._errors.extend(scan_errors(log_text, timestamp=self._clock()))
        return self

    def result(self) -> ReportMetrics:
        return ReportMetrics(
            load_time=self._load_time or 0,
            average_response_time=self._average_response_time or 0,
            errors=list(self._errors),
        )


def scan_errors(log_text: str, *, timestamp: datetime | None = None) -> list[ErrorRecord]:
    """Capture every ``Error:`` / ``failed:`` occurrence up to the end of its line."""

    stamp = timestamp or utc_now()
    records: list[ErrorRecord] = []
    for match in _ERROR_PATTERN.finditer(log_text):
        line_end = log_text.find("\n", match.start())
        if line_end == -1:
            line_end = len(log_text)
        message = log_text[match.start():line_end].strip()
        records.append(ErrorRecord(message=message, timestamp=stamp, scenario=UNKNOWN_SCENARIO))
    return records


def _read_ms(pattern: re.Pattern[str], text: str) -> Optional[float]:
    match = pattern.search(text)
    return float(match.group("value")) if match else None


def _mean_duration(scenarios: list[ScenarioResult]) -> Optional[float]:
    durations = [scenario.duration for scenario in scenarios if scenario.duration is not None]
    if not durations:
        return None
    return fmean(durations)
