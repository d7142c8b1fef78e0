"""Logging setup for the package."""

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "magician_board"


def setup_logging(level: Union[int, str] = logging.INFO, console: Optional[Console] = None) -> logging.Logger:
    """Attach a rich handler to the package logger once and set its level."""
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        log_time_format="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
    logger.addHandler(handler)

    return logger
