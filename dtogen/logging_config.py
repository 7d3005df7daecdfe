"""Logging setup shared by the CLI and library modules."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "dtogen"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace."""
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def setup_logging(
    level: int | str = logging.WARNING, console: Optional[Console] = None
) -> logging.Logger:
    """Attach a RichHandler to the package logger.

    Safe to call more than once; later calls only change the level.

    Args:
        level: Logging level name or number.
        console: Console to log to (defaults to stderr).

    Returns:
        The package root logger.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    if not _configured:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        _configured = True

    return logger
