"""Console reporter with environment detection for report summaries."""

import json
import os
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ReportModel, ScenarioStatus
from .output_config import OutputFormat

_STATUS_STYLES = {
    ScenarioStatus.PASSED: ("✓ PASS", "green"),
    ScenarioStatus.FAILED: ("✗ FAIL", "red"),
    ScenarioStatus.WARNING: ("! WARN", "yellow"),
    ScenarioStatus.RUNNING: ("… RUN", "dim"),
}


class ConsoleReporter:
    """
    Prints a synthesized report to the terminal.

    Automatically detects:
    - Interactive terminals (use rich tables and panels)
    - CI/CD environments (use plain text)
    - Pipe/redirect scenarios (use plain text)
    """

    def __init__(self, output_format: OutputFormat = OutputFormat.AUTO, console: Console | None = None):
        self.output_format = output_format
        self._detect_environment()
        self.console = console or (Console() if self.use_rich else None)

    def _detect_environment(self) -> None:
        """Detect if we should use rich output or plain text."""
        if self.output_format == OutputFormat.RICH:
            self.use_rich = True
        elif self.output_format in (OutputFormat.PLAIN, OutputFormat.JSON):
            self.use_rich = False
        else:  # AUTO
            is_terminal = sys.stdout.isatty()
            is_ci = any(
                name in os.environ
                for name in ("CI", "GITHUB_ACTIONS", "JENKINS_HOME", "GITLAB_CI", "TRAVIS")
            )
            self.use_rich = is_terminal and not is_ci

    def show_report(self, report: ReportModel) -> None:
        if self.output_format == OutputFormat.JSON:
            print(json.dumps(report.as_serializable(), indent=2))
            return
        if self.use_rich:
            self._show_rich(report)
        else:
            self._show_plain(report)

    def print_info(self, message: str) -> None:
        if self.output_format == OutputFormat.JSON:
            return
        if self.use_rich:
            self.console.print(f"[cyan]{message}[/]")
        else:
            print(message)

    def _show_rich(self, report: ReportModel) -> None:
        table = Table(title=report.title, show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", width=4)
        table.add_column("Scenario", width=40)
        table.add_column("Status", width=10)
        table.add_column("Duration", justify="right", width=12)
        for scenario in report.scenarios:
            label, style = _STATUS_STYLES[scenario.status]
            table.add_row(
                str(scenario.id),
                scenario.name,
                Text(label, style=style),
                f"{scenario.duration or 0:.0f}ms",
            )
            if scenario.error:
                table.add_row("", Text(f"Error: {scenario.error}", style="red"), "", "")
            for warning in scenario.warnings:
                table.add_row("", Text(f"Warning: {warning}", style="yellow"), "", "")
        self.console.print(table)

        summary = report.summary
        summary_text = Text()
        summary_text.append(f"Total: {summary.total}  ", style="bold")
        summary_text.append(f"Passed: {summary.passed}  ", style="bold green")
        summary_text.append(f"Failed: {summary.failed}  ", style="bold red" if summary.failed else "bold green")
        summary_text.append(f"Warning: {summary.warning}  ", style="bold yellow")
        summary_text.append(f"Success: {summary.success_rate:.1f}%", style="bold cyan")
        for recommendation in report.recommendations:
            summary_text.append(f"\n• {recommendation.message}", style="yellow")

        status = "✓ ALL SCENARIOS PASSED" if summary.failed == 0 else "✗ ISSUES DETECTED"
        self.console.print(Panel(
            summary_text,
            title=Text(status, style="bold green" if summary.failed == 0 else "bold red"),
            border_style="green" if summary.failed == 0 else "red",
        ))

    def _show_plain(self, report: ReportModel) -> None:
        print(report.title)
        print("-" * 80)
        for scenario in report.scenarios:
            label, _ = _STATUS_STYLES[scenario.status]
            print(f"[{scenario.id}] {scenario.name} {label} ({scenario.duration or 0:.0f}ms)")
            if scenario.error:
                print(f"  Error: {scenario.error}")
            for warning in scenario.warnings:
                print(f"  Warning: {warning}")
        print("-" * 80)
        summary = report.summary
        print(
            f"Total: {summary.total} | Passed: {summary.passed} | Failed: {summary.failed} | "
            f"Warning: {summary.warning} | Success: {summary.success_rate:.1f}%"
        )
        for recommendation in report.recommendations:
            print(f"* {recommendation.message}")
        print("✓ ALL SCENARIOS PASSED" if summary.failed == 0 else "✗ ISSUES DETECTED")
