"""Entry point for the report-synthesizer application."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

if __package__ in {None, ""}:
    sys.path.append(str(Path(__file__).resolve().parents[1]))
    __package__ = "report_synthesizer"

from .console_reporter import ConsoleReporter
from .logging_utils import configure_logging
from .output_config import get_output_format, log_format_for
from .publishers import PUBLISHERS, get_publisher
from .settings import SettingsError, load_settings
from .synthesizer import ReportHints, read_log, synthesize_report

app = typer.Typer(help="Turn dashboard test-run logs into structured reports.")

DEFAULT_OUTPUT_DIR = Path("logs/reports")


@app.command()
def report(
    log_file: Optional[Path] = typer.Option(None, help="Execution log of the test run. Missing files yield a default report."),
    output_dir: Path = typer.Option(DEFAULT_OUTPUT_DIR, help="Directory for the report snapshot."),
    publisher: str = typer.Option("full", help=f"Publisher to use: {', '.join(sorted(PUBLISHERS))}."),
    settings: Optional[Path] = typer.Option(None, help="Optional YAML/JSON settings file."),
    title: Optional[str] = typer.Option(None, help="Report title."),
    url: Optional[str] = typer.Option(None, help="Dashboard URL; overrides the log's Target marker."),
    user_agent: Optional[str] = typer.Option(None, help="User agent recorded in the report."),
    viewport: Optional[str] = typer.Option(None, help="Viewport recorded in the report."),
    declared_total: Optional[int] = typer.Option(None, min=0, help="Expected number of scenarios."),
    output_format: Optional[str] = typer.Option(None, help="Console output: auto, rich, plain or json."),
    log_level: str = typer.Option("warning", help="Log level for diagnostic output."),
) -> None:
    """Synthesize a report from a run log and publish it."""

    fmt = get_output_format(output_format)
    configure_logging(log_level, log_format_for(fmt))

    try:
        report_settings = load_settings(settings)
        report_publisher = get_publisher(publisher, output_dir)
    except (SettingsError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    log_text = read_log(log_file) if log_file is not None else None
    hints = ReportHints(
        title=title,
        declared_total=declared_total,
        url=url,
        user_agent=user_agent,
        viewport=viewport,
    )
    result = synthesize_report(log_text, hints, settings=report_settings)
    path = report_publisher.publish(result)

    reporter = ConsoleReporter(output_format=fmt)
    reporter.show_report(result)
    reporter.print_info(f"Report saved to: {path}")


def run() -> None:
    """CLI entry point for console_scripts."""

    app()


if __name__ == "__main__":  # pragma: no cover
    run()
