"""Report, scenario and event models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ScenarioStatus(str, Enum):
    """Lifecycle of a scenario; RUNNING only exists while a log is parsed."""

    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"


class EventKind(str, Enum):
    START = "start"
    COMPLETED = "completed"
    FAILED = "failed"
    WARNING = "warning"


@dataclass(frozen=True)
class ScenarioEvent:
    """Single typed match produced while scanning a log."""

    kind: EventKind
    name: str
    line: str
    line_number: int
    detail: Optional[str] = None


class ReportBaseModel(BaseModel):
    """Base model serializing with the camelCase names of the report snapshot."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def as_serializable(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary keyed by wire names."""

        return self.model_dump(mode="json", by_alias=True)


class ScenarioResult(ReportBaseModel):
    """Durable unit of the report."""

    id: int
    name: str
    status: ScenarioStatus = ScenarioStatus.RUNNING
    start_time: datetime = Field(default_factory=utc_now)
    end_time: Optional[datetime] = None
    duration: Optional[float] = None
    warnings: list[str] = Field(default_factory=list)
    error: Optional[str] = None
    steps: list[dict[str, Any]] = Field(default_factory=list)


class ErrorRecord(ReportBaseModel):
    message: str
    timestamp: datetime = Field(default_factory=utc_now)
    scenario: str = "Unknown"


class ReportMetrics(ReportBaseModel):
    """Scalar performance metrics plus the collected error lines."""

    load_time: float = Field(default=0, ge=0)
    average_response_time: float = Field(default=0, ge=0)
    errors: list[ErrorRecord] = Field(default_factory=list)


class ReportSummary(ReportBaseModel):
    total: int = 0
    passed: int = 0
    failed: int = 0
    warning: int = 0
    success_rate: float = 0.0


class Environment(ReportBaseModel):
    url: str = ""
    user_agent: str = ""
    viewport: str = ""
    timestamp: datetime = Field(default_factory=utc_now)


class Screenshot(ReportBaseModel):
    """Screenshot reference supplied by the execution side; never inspected."""

    name: str
    path: str
    scenario_name: str = "Unknown"
    type: str = "General"


class Recommendation(ReportBaseModel):
    code: str
    message: str


class ReportModel(ReportBaseModel):
    """Complete, renderer-agnostic outcome of one test run."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    title: str
    timestamp: datetime = Field(default_factory=utc_now)
    environment: Environment = Field(default_factory=Environment)
    start_time: datetime
    end_time: datetime
    duration: float
    scenarios: list[ScenarioResult] = Field(default_factory=list)
    summary: ReportSummary = Field(default_factory=ReportSummary)
    metrics: ReportMetrics = Field(default_factory=ReportMetrics)
    screenshots: list[Screenshot] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)
