"""structlog configuration shared by the library and the CLI."""

from __future__ import annotations

import logging
import sys
from typing import cast

import structlog
from structlog.typing import FilteringBoundLogger

# Level used when the library is imported without configure_logging().
DEFAULT_LEVEL = "WARNING"


def _stderr_logger(*args: object) -> structlog.PrintLogger:
    return structlog.PrintLogger(sys.stderr)


def _configure_structlog(log_level: int, json_output: bool) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure stdlib logging and structlog for the process.

    Logs go to stderr so command output on stdout stays machine-readable.
    Loggers are not cached, so each event is written to the current sys.stderr.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)
    _configure_structlog(log_level, json_output)


def configure_default_logging() -> None:
    """Send warnings and errors to stderr unless structlog is already configured.

    structlog's own default prints every level to stdout, which would mix
    library events into a host program's output.
    """
    if structlog.is_configured():
        return
    _configure_structlog(getattr(logging, DEFAULT_LEVEL), json_output=False)


def get_logger(name: str) -> FilteringBoundLogger:
    return cast(FilteringBoundLogger, structlog.get_logger(name))


configure_default_logging()
