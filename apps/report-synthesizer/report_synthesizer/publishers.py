"""Report publishers writing finished reports to disk."""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from .models import ReportModel, ScenarioStatus

LOGGER = structlog.get_logger("report_synthesizer")


class ReportPublisher(ABC):
    """Persists a ReportModel and returns the path of the primary artifact."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    @abstractmethod
    def publish(self, report: ReportModel) -> Path:
        ...

    def _stem(self, report: ReportModel) -> str:
        stamp = report.timestamp.strftime("%Y-%m-%dT%H-%M-%S")
        return f"test-report-{stamp}"

    def _write_snapshot(self, report: ReportModel) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        snapshot = self.output_dir / f"{self._stem(report)}.json"
        with snapshot.open("w", encoding="utf-8") as fp:
            json.dump(report.as_serializable(), fp, indent=2, ensure_ascii=False)
        LOGGER.info("snapshot_written", path=str(snapshot))
        return snapshot


class MinimalReportPublisher(ReportPublisher):
    """Writes only the JSON snapshot."""

    def publish(self, report: ReportModel) -> Path:
        return self._write_snapshot(report)


class FullReportPublisher(ReportPublisher):
    """Writes the JSON snapshot plus a JUnit XML file for CI consumers."""

    def publish(self, report: ReportModel) -> Path:
        snapshot = self._write_snapshot(report)
        junit_file = self.output_dir / f"{self._stem(report)}.junit.xml"
        self._write_junit(report, junit_file)
        LOGGER.info("junit_written", path=str(junit_file))
        return snapshot

    def _write_junit(self, report: ReportModel, junit_file: Path) -> None:
        suite = ET.Element(
            "testsuite",
            attrib={
                "name": report.title,
                "tests": str(report.summary.total),
                "failures": str(report.summary.failed),
                "time": str(report.duration / 1000),
            },
        )
        for scenario in report.scenarios:
            case = ET.SubElement(
                suite,
                "testcase",
                attrib={
                    "classname": report.environment.url or "dashboard",
                    "name": scenario.name,
                    "time": str((scenario.duration or 0) / 1000),
                },
            )
            if scenario.status is ScenarioStatus.FAILED:
                failure = ET.SubElement(case, "failure", attrib={"message": scenario.error or "Scenario failed"})
                failure.text = scenario.error or ""
            if scenario.warnings:
                system_out = ET.SubElement(case, "system-out")
                system_out.text = "\n".join(f"Warning: {warning}" for warning in scenario.warnings)
        tree = ET.ElementTree(suite)
        tree.write(junit_file, encoding="utf-8", xml_declaration=True)


PUBLISHERS: dict[str, type[ReportPublisher]] = {
    "full": FullReportPublisher,
    "minimal": MinimalReportPublisher,
}


def get_publisher(kind: str, output_dir: Path) -> ReportPublisher:
    try:
        publisher_cls = PUBLISHERS[kind.lower()]
    except KeyError:
        raise ValueError(f"Unknown publisher '{kind}', expected one of {sorted(PUBLISHERS)}") from None
    return publisher_cls(output_dir)
