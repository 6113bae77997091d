"""State machine folding scenario events into scenario results."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, Optional

import structlog

from .models import EventKind, ScenarioEvent, ScenarioResult, ScenarioStatus, utc_now

LOGGER = structlog.get_logger("report_synthesizer")

DEFAULT_FAILURE_MESSAGE = "Scenario failed"

Correlation = Callable[[ScenarioEvent, ScenarioResult], bool]


def loose_correlation(event: ScenarioEvent, current: ScenarioResult) -> bool:
    """Accept when either name contains the other or the raw line names the scenario.

    Similar names can be mis-associated and drifted labels are dropped;
    ``strict_correlation`` can be passed to the reconstructor instead.
    """

    return event.name in current.name or current.name in event.name or current.name in event.line


def strict_correlation(event: ScenarioEvent, current: ScenarioResult) -> bool:
    return event.name.casefold() == current.name.casefold()


class ScenarioReconstructor:
    """Tracks the open scenario and hands out ids in discovery order."""

    def __init__(
        self,
        *,
        correlation: Correlation = loose_correlation,
        placeholder_duration: float = 5000,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._correlation = correlation
        self._placeholder_duration = placeholder_duration
        self._clock = clock
        self._next_id = 1
        self._current: Optional[ScenarioResult] = None
        self._closed: list[ScenarioResult] = []

    def feed(self, event: ScenarioEvent) -> bool:
        """Apply one event and report whether it changed the open scenario."""

        if event.kind is EventKind.START:
            self._close_current()
            self._current = ScenarioResult(id=self._next_id, name=event.name, start_time=self._clock())
            self._next_id += 1
            return True

        current = self._current
        if current is None:
            return False

        if event.kind is EventKind.WARNING:
            current.warnings.append(event.detail or "")
            if current.status is ScenarioStatus.RUNNING:
                current.status = ScenarioStatus.WARNING
            return True

        if not self._correlation(event, current):
            LOGGER.debug(
                "scenario_correlation_miss",
                kind=event.kind.value,
                event_name=event.name,
                current=current.name,
                line_number=event.line_number,
            )
            return False

        if event.kind is EventKind.COMPLETED:
            current.status = ScenarioStatus.PASSED
            current.error = None
        else:
            current.status = ScenarioStatus.FAILED
            current.error = event.detail or DEFAULT_FAILURE_MESSAGE
        current.end_time = self._clock()
        current.duration = self._placeholder_duration
        return True

    def finish(self) -> list[ScenarioResult]:
        """Close the open scenario and return everything reconstructed so far."""

        self._close_current()
        return list(self._closed)

    def reconstruct(self, events: Iterable[ScenarioEvent]) -> list[ScenarioResult]:
        consumed_line = None
        for event in events:
            if event.line_number == consumed_line:
                continue
            if self.feed(event):
                consumed_line = event.line_number
        return self.finish()

    def _close_current(self) -> None:
        current = self._current
        if current is None:
            return
        # An unterminated scenario cannot be told apart from a hung one; it is reported as passed.
        if current.status is ScenarioStatus.RUNNING:
            current.status = ScenarioStatus.PASSED
        if current.end_time is None:
            current.end_time = self._clock()
        if current.duration is None:
            current.duration = self._placeholder_duration
        self._closed.append(current)
        self._current = None
