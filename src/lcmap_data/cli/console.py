"""Rich console and logging setup for the CLI layer.

Log records and diagnostics go to stderr; only command output (the
``info`` dump) goes to stdout.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "lcmap_data"

console = Console(stderr=True)
"""Shared stderr console used for log rendering and operator notices."""


def get_stdout_console() -> Console:
    """Create a Rich console targeting stdout."""
    return Console()


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a :class:`RichHandler` to the package logger.

    Repeated calls only adjust the level; handlers are never stacked.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(
            RichHandler(
                console=console,
                rich_tracebacks=True,
                show_path=False,
            )
        )
    return logger
