"""Pattern-based extraction of scenario events from raw run logs."""

from __future__ import annotations

import re
from typing import Iterator, Optional

from .models import EventKind, ScenarioEvent

_START_PATTERN = re.compile(r"Running scenario:\s*(?P<name>.*)", re.IGNORECASE)
_COMPLETED_PATTERN = re.compile(r'Scenario\s+"?(?P<name>[^"]*)"?\s+completed successfully', re.IGNORECASE)
_LOOSE_COMPLETED_PATTERN = re.compile(r"(?P<name>.*?)\s*completed successfully", re.IGNORECASE)
_FAILED_PATTERN = re.compile(
    r'Scenario\s+"?(?P<name>[^"]*)"?\s+failed(?::\s*(?P<detail>.*))?',
    re.IGNORECASE,
)
_WARNING_PATTERN = re.compile(r"Warning:\s*(?P<detail>.*)", re.IGNORECASE)
_DECLARED_TOTAL_PATTERN = re.compile(r"Total scenarios:\s*(?P<total>\d+)", re.IGNORECASE)
_VOCABULARY_PATTERN = re.compile(r"scenario", re.IGNORECASE)


def extract_events(text: Optional[str]) -> Iterator[ScenarioEvent]:
    """Yield scenario events in line order.

    A Start line yields only its Start event. Any other line yields one
    candidate per matching pattern, ordered Completed, Failed, Warning; the
    reconstructor applies the first candidate it accepts and skips the rest
    of that line.
    """

    if not text:
        return
    for line_number, line in enumerate(text.splitlines(), start=1):
        yield from _match_line(line, line_number)


def find_declared_total(text: Optional[str]) -> Optional[int]:
    """Return the N of the first ``Total scenarios: N`` marker, if any."""

    if not text:
        return None
    match = _DECLARED_TOTAL_PATTERN.search(text)
    return int(match.group("total")) if match else None


def has_scenario_vocabulary(text: Optional[str]) -> bool:
    if not text:
        return False
    return bool(_VOCABULARY_PATTERN.search(text)) or find_declared_total(text) is not None


def _match_line(line: str, line_number: int) -> Iterator[ScenarioEvent]:
    match = _START_PATTERN.search(line)
    if match:
        yield ScenarioEvent(EventKind.START, _clean_name(match.group("name")), line, line_number)
        return

    match = _COMPLETED_PATTERN.search(line) or _LOOSE_COMPLETED_PATTERN.search(line)
    if match:
        yield ScenarioEvent(EventKind.COMPLETED, _clean_name(match.group("name")), line, line_number)

    match = _FAILED_PATTERN.search(line)
    if match:
        detail = (match.group("detail") or "").strip() or None
        yield ScenarioEvent(EventKind.FAILED, _clean_name(match.group("name")), line, line_number, detail)

    match = _WARNING_PATTERN.search(line)
    if match:
        yield ScenarioEvent(EventKind.WARNING, "", line, line_number, match.group("detail").strip())


def _clean_name(raw: str) -> str:
    return raw.strip().strip("\"'").strip()
