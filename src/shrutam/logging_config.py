"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_dir: str | None = None,
) -> None:
    """Configure structured logging for the sync core and CLI.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_format: "json" for structured output, "text" for human-readable
        log_dir: Directory for log files. If None, logs go to stderr only.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure stdlib logging. Quotes go to stdout, so logs use stderr.
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path / "shrutam.log")
        handlers.append(file_handler)

    logging.basicConfig(
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        level=log_level,
        handlers=handlers,
        force=True,
    )
