"""Logging configuration for docfill entry points (scripts, tests)."""

import logging
import sys

from docfill.core.config import get_settings

# Chatty third-party loggers kept at WARNING unless debugging them directly.
_QUIET_LOGGERS = ("aiosqlite", "asyncio")


def setup_logging(level: int | None = None) -> None:
    """Configure process-wide logging once per entry point.

    Level is `level` when given, else DEBUG when settings.debug is True,
    otherwise INFO. Records go to stdout, next to the progress lines the
    bulk generation script prints.
    """
    settings = get_settings()
    if level is None:
        level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the module logger (pass __name__)."""
    return logging.getLogger(name)
