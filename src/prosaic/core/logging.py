import logging
import os
import sys
from typing import Any, Literal

import structlog

LogFormat = Literal["json", "plain", "auto"]

_CI_VARS = ["CI", "CONTINUOUS_INTEGRATION", "GITHUB_ACTIONS", "JENKINS_URL"]


def _should_use_json_format() -> bool:
    """Use JSON lines in CI or when stderr is not attached to a terminal."""
    if any(os.environ.get(var) for var in _CI_VARS):
        return True
    return not sys.stderr.isatty()


def setup_logging(format_type: LogFormat = "auto", level: str = "info") -> None:
    """
    Configure structlog for the segmenter and its CLI.

    Segmented output owns stdout, so every log line is written to stderr.

    Args:
        format_type: "json" for JSON output, "plain" for human-readable,
                "auto" to auto-detect based on TTY/CI.
        level: Minimum level name ("debug", "info", "warning", "error").
    """
    use_json = format_type == "json" or (
        format_type == "auto" and _should_use_json_format()
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    min_level = logging.getLevelName(level.upper())
    if not isinstance(min_level, int):
        min_level = logging.INFO

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(component: str) -> Any:
    """Return a lazy logger carrying the pipeline component name."""
    return structlog.get_logger(component=component)


log = structlog.get_logger()
