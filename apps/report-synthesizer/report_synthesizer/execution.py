"""Contract with the scenario-execution side of a dashboard run."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Protocol

from pydantic import BaseModel, Field

from .metrics import MetricHints
from .models import ReportModel, utc_now
from .settings import DEFAULT_SCENARIO_POOL, ReportSettings
from .synthesizer import ReportHints, synthesize_report

PASSING_STATUSES = {"success", "passed"}


class ExecutedScenario(BaseModel):
    """Outcome of one scenario as reported by the executor."""

    name: str
    status: str
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status.lower() in PASSING_STATUSES


class ExecutionOutcome(BaseModel):
    success: bool = True
    scenarios: list[ExecutedScenario] = Field(default_factory=list)
    error: Optional[str] = None
    start_time: datetime = Field(default_factory=utc_now)
    end_time: datetime = Field(default_factory=utc_now)
    metrics: MetricHints = Field(default_factory=MetricHints)


class ScenarioExecutor(Protocol):
    """Anything that can run dashboard scenarios and describe the outcome."""

    def run(self) -> ExecutionOutcome:
        ...


class StubScenarioExecutor:
    """Reports every canonical scenario as successful without touching a browser."""

    def __init__(
        self,
        scenario_names: list[str] | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._names = list(scenario_names or DEFAULT_SCENARIO_POOL)
        self._clock = clock

    def run(self) -> ExecutionOutcome:
        started = self._clock()
        scenarios = [ExecutedScenario(name=name, status="success") for name in self._names]
        return ExecutionOutcome(success=True, scenarios=scenarios, start_time=started, end_time=self._clock())


def render_execution_log(outcome: ExecutionOutcome, *, target: str = "") -> str:
    """Write an outcome as the run log the extractor understands."""

    lines = [f"Starting test at: {outcome.start_time.isoformat()}"]
    if target:
        lines.append(f"Target: {target}")
    lines.append("Starting dashboard tests...")
    lines.append(f"Test completed at: {outcome.end_time.isoformat()}")
    if outcome.success:
        lines.append("All tests completed successfully")
    else:
        lines.append(f"Tests failed: {outcome.error or 'Unknown error'}")

    lines.append(f"Total scenarios: {len(outcome.scenarios)}")
    for scenario in outcome.scenarios:
        lines.append(f"Running scenario: {scenario.name}")
        if scenario.passed:
            lines.append(f'Scenario "{scenario.name}" completed successfully')
        else:
            lines.append(f'Scenario "{scenario.name}" failed: {scenario.error or "Unknown error"}')
    return "\n".join(lines) + "\n"


def synthesize_from_outcome(
    outcome: ExecutionOutcome,
    hints: ReportHints | None = None,
    *,
    settings: ReportSettings | None = None,
    target: str = "",
    clock: Callable[[], datetime] = utc_now,
) -> ReportModel:
    """Build a report for an executor outcome, routing it through the log format."""

    hints = hints or ReportHints()
    merged = hints.model_copy(
        update={
            "url": hints.url or target or None,
            "metrics": _merge_metrics(hints.metrics, outcome.metrics),
        }
    )
    log_text = render_execution_log(outcome, target=target)
    return synthesize_report(log_text, merged, settings=settings, clock=clock)


def _merge_metrics(preferred: MetricHints, fallback: MetricHints) -> MetricHints:
    """Combine two metric sources field by field; ``preferred`` wins where both are set."""

    return MetricHints(
        load_time=preferred.load_time if preferred.load_time is not None else fallback.load_time,
        average_response_time=(
            preferred.average_response_time
            if preferred.average_response_time is not None
            else fallback.average_response_time
        ),
        errors=[*preferred.errors, *fallback.errors],
    )
