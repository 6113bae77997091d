"""Assembles the immutable report model."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Optional

from .models import (
    Environment,
    Recommendation,
    ReportMetrics,
    ReportModel,
    ReportSummary,
    ScenarioResult,
    ScenarioStatus,
    Screenshot,
    utc_now,
)
from .settings import ReportSettings


def summarize(scenarios: list[ScenarioResult]) -> ReportSummary:
    """Count statuses; the success rate is 0.0 for an empty list."""

    passed = sum(1 for scenario in scenarios if scenario.status is ScenarioStatus.PASSED)
    failed = sum(1 for scenario in scenarios if scenario.status is ScenarioStatus.FAILED)
    warning = sum(1 for scenario in scenarios if scenario.status is ScenarioStatus.WARNING)
    total = passed + failed + warning
    success_rate = passed / total * 100 if total else 0.0
    return ReportSummary(total=total, passed=passed, failed=failed, warning=warning, success_rate=success_rate)


def recommend(
    summary: ReportSummary,
    metrics: ReportMetrics,
    settings: ReportSettings | None = None,
) -> list[Recommendation]:
    thresholds = (settings or ReportSettings()).thresholds
    messages = [error.message.lower() for error in metrics.errors]
    recommendations: list[Recommendation] = []

    if metrics.load_time > thresholds.max_load_time:
        recommendations.append(
            Recommendation(
                code="slow_initial_load",
                message="Dashboard initial load time is high. Consider reducing the data loaded on startup.",
            )
        )
    if metrics.average_response_time > thresholds.max_average_response_time:
        recommendations.append(
            Recommendation(
                code="slow_response",
                message="The average response time is above the limit. Review server-side and reactive operations.",
            )
        )
    if _mentions(messages, thresholds.timeout_keywords):
        recommendations.append(
            Recommendation(
                code="timeouts",
                message="Timeouts were detected. Look for long-running operations blocking the UI.",
            )
        )
    if _mentions(messages, thresholds.missing_element_keywords):
        recommendations.append(
            Recommendation(
                code="missing_elements",
                message="Some UI elements could not be found. Check that the UI is consistent across states and screen sizes.",
            )
        )
    if summary.failed > 0:
        recommendations.append(
            Recommendation(
                code="failed_scenarios",
                message="Failed scenarios detected. Review the scenario list for details.",
            )
        )
    return recommendations


def _mentions(messages: list[str], keywords: list[str]) -> bool:
    lowered = [keyword.lower() for keyword in keywords]
    return any(keyword in message for message in messages for keyword in lowered)


class ReportModelBuilder:
    """Collects the pieces of a run and produces one frozen ReportModel."""

    def __init__(
        self,
        settings: ReportSettings | None = None,
        *,
        title: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._settings = settings or ReportSettings()
        self._clock = clock
        self._title = title or self._settings.title
        self._environment = Environment(timestamp=clock())
        self._start_time: Optional[datetime] = None
        self._end_time: Optional[datetime] = None
        self._scenarios: list[ScenarioResult] = []
        self._metrics = ReportMetrics()
        self._screenshots: list[Screenshot] = []

    def set_environment(self, **fields: Any) -> "ReportModelBuilder":
        values = {key: value for key, value in fields.items() if value is not None}
        self._environment = self._environment.model_copy(update=values)
        return self

    def set_timing(self, start_time: datetime, end_time: datetime) -> "ReportModelBuilder":
        self._start_time = start_time
        self._end_time = end_time
        return self

    def add_scenarios(self, scenarios: list[ScenarioResult]) -> "ReportModelBuilder":
        self._scenarios.extend(scenarios)
        return self

    def set_metrics(self, metrics: ReportMetrics) -> "ReportModelBuilder":
        self._metrics = metrics
        return self

    def add_screenshots(self, screenshots: list[Screenshot]) -> "ReportModelBuilder":
        self._screenshots.extend(screenshots)
        return self

    def build(self) -> ReportModel:
        now = self._clock()
        start_time = self._start_time or now
        end_time = self._end_time or now
        duration = max((end_time - start_time).total_seconds() * 1000, 0.0)
        scenarios = [scenario.model_copy(deep=True) for scenario in self._scenarios]
        summary = summarize(scenarios)
        metrics = self._metrics.model_copy(deep=True)
        return ReportModel(
            title=self._title,
            timestamp=now,
            environment=self._environment.model_copy(),
            start_time=start_time,
            end_time=end_time,
            duration=duration,
            scenarios=scenarios,
            summary=summary,
            metrics=metrics,
            screenshots=[screenshot.model_copy() for screenshot in self._screenshots],
            recommendations=recommend(summary, metrics, self._settings),
        )
