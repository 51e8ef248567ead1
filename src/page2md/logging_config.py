"""Logging setup shared by the server and the one-shot CLI."""

import logging
import sys
from typing import Any, Optional, TextIO

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the ``page2md`` logger.

    Handlers are replaced on every call, so the CLI can reconfigure after
    reading the config file.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Also append records to this file
        stream: Console stream (stdout by default; the convert command
            passes stderr so converted output stays clean)
        format_string: Custom format for log records

    Returns:
        The configured logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    logger = logging.getLogger("page2md")
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # uvicorn configures the root logger; keep our records out of it
    logger.propagate = False
    return logger


def uvicorn_log_config(level: str = "INFO", format_string: Optional[str] = None) -> dict[str, Any]:
    """
    ``log_config`` for uvicorn so server and access logs share our format.
    """
    fmt = format_string or DEFAULT_FORMAT
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": fmt}},
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": level.upper(), "propagate": False},
            "uvicorn.error": {"level": level.upper()},
            "uvicorn.access": {"handlers": ["default"], "level": level.upper(), "propagate": False},
        },
    }
