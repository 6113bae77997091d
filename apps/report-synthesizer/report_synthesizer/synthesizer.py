"""Log-to-report pipeline."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

import structlog
from pydantic import BaseModel, Field

from .builder import ReportModelBuilder
from .extractor import extract_events, find_declared_total
from .metrics import MetricHints, MetricsAggregator
from .models import ReportModel, ScenarioResult, Screenshot, utc_now
from .reconciliation import reconcile
from .reconstructor import Correlation, ScenarioReconstructor, loose_correlation
from .settings import ReportSettings

LOGGER = structlog.get_logger("report_synthesizer")

_TARGET_PATTERN = re.compile(r"Target:\s*(?P<url>https?://\S+)")
_STARTED_PATTERN = re.compile(r"Starting test at:\s*(?P<value>.+)")
_FINISHED_PATTERN = re.compile(r"Test completed at:\s*(?P<value>.+)")


class ReportHints(BaseModel):
    """Structured inputs that override or complement what the log says."""

    title: Optional[str] = None
    declared_total: Optional[int] = Field(default=None, ge=0)
    metrics: MetricHints = Field(default_factory=MetricHints)
    url: Optional[str] = None
    user_agent: Optional[str] = None
    viewport: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    screenshots: list[Screenshot] = Field(default_factory=list)


def parse_scenarios(
    log_text: Optional[str],
    *,
    declared_total: Optional[int] = None,
    settings: ReportSettings | None = None,
    correlation: Correlation = loose_correlation,
    clock: Callable[[], datetime] = utc_now,
) -> list[ScenarioResult]:
    """Extract, reconstruct and reconcile the scenarios of one log."""

    settings = settings or ReportSettings()
    if declared_total is None:
        declared_total = find_declared_total(log_text)
    reconstructor = ScenarioReconstructor(
        correlation=correlation,
        placeholder_duration=settings.placeholder_duration,
        clock=clock,
    )
    scenarios = reconstructor.reconstruct(extract_events(log_text))
    return reconcile(scenarios, log_text, declared_total=declared_total, settings=settings, clock=clock)


def synthesize_report(
    log_text: Optional[str],
    hints: ReportHints | None = None,
    *,
    settings: ReportSettings | None = None,
    correlation: Correlation = loose_correlation,
    clock: Callable[[], datetime] = utc_now,
) -> ReportModel:
    """Turn raw run output into a ReportModel; never raises for bad input."""

    settings = settings or ReportSettings()
    hints = hints or ReportHints()
    text = log_text or ""
    LOGGER.info("synthesizing_report", log_length=len(text))

    scenarios = parse_scenarios(
        log_text,
        declared_total=hints.declared_total,
        settings=settings,
        correlation=correlation,
        clock=clock,
    )
    metrics = MetricsAggregator(settings, clock=clock).merge(hints.metrics).collect(log_text, scenarios).result()

    now = clock()
    start_time = hints.start_time or _read_timestamp(_STARTED_PATTERN, text) or now
    end_time = hints.end_time or _read_timestamp(_FINISHED_PATTERN, text) or now

    builder = ReportModelBuilder(settings, title=hints.title, clock=clock)
    builder.set_environment(
        url=hints.url or _read_target(text) or "",
        user_agent=hints.user_agent or settings.default_user_agent,
        viewport=hints.viewport or settings.default_viewport,
    )
    builder.set_timing(_as_utc(start_time), _as_utc(end_time))
    builder.add_scenarios(scenarios).set_metrics(metrics).add_screenshots(hints.screenshots)
    report = builder.build()

    LOGGER.info(
        "report_synthesized",
        total=report.summary.total,
        passed=report.summary.passed,
        failed=report.summary.failed,
        warning=report.summary.warning,
        errors=len(report.metrics.errors),
    )
    return report


def read_log(path: Path) -> Optional[str]:
    """Read a log file; a missing or unreadable file counts as absent input."""

    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            return handle.read()
    except OSError as exc:
        LOGGER.warning("log_unreadable", path=str(path), error=str(exc))
        return None


def _read_target(text: str) -> Optional[str]:
    match = _TARGET_PATTERN.search(text)
    return match.group("url") if match else None


def _read_timestamp(pattern: re.Pattern[str], text: str) -> Optional[datetime]:
    match = pattern.search(text)
    if not match:
        return None
    raw = match.group("value").strip()
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        LOGGER.debug("timestamp_unparseable", value=raw)
        return None


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
