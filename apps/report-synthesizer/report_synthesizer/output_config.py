"""Console output and log format selection."""

import os
from enum import Enum
from typing import Literal


class OutputFormat(str, Enum):
    """How the run summary is printed."""
    AUTO = "auto"
    RICH = "rich"
    PLAIN = "plain"
    JSON = "json"


LogFormat = Literal["json", "console", "plain"]

ENV_VAR_NAME = "CONSOLE_OUTPUT_FORMAT"


def get_output_format(cli_override: str | None = None) -> OutputFormat:
    """
    Get the output format with priority: CLI parameter > Environment variable > Default (auto).

    Args:
        cli_override: Optional CLI parameter value that takes precedence

    Returns:
        OutputFormat enum value
    """
    for candidate in (cli_override, os.environ.get(ENV_VAR_NAME)):
        if not candidate:
            continue
        try:
            return OutputFormat(candidate.lower())
        except ValueError:
            continue
    return OutputFormat.AUTO


def log_format_for(output_format: OutputFormat) -> LogFormat:
    """Map the console output format onto a structlog renderer choice."""
    if output_format == OutputFormat.JSON:
        return "json"
    if output_format == OutputFormat.PLAIN:
        return "plain"
    return "console"
