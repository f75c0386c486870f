"""Logging setup — stdlib loggers rendered through rich."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "intentzero"


def configure_logging(level: str | int = "WARNING") -> logging.Logger:
    """Attach a RichHandler (stderr) to the package logger once and set its level.

    Modules log through logging.getLogger(__name__), which nests under the
    package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
