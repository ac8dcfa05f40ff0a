from __future__ import annotations

import sys

from loguru import logger

CONSOLE_FORMAT = "{time:HH:mm:ss} | {level:<8} | {extra[tool_id]} | {message}"


def configure_logging(level: str = "WARNING") -> None:
    """Route loguru to stderr only; stdout is reserved for calculation output."""
    logger.remove()
    logger.configure(extra={"tool_id": "-"})
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, backtrace=False, diagnose=False)
