"""Mini README: Application-wide logging helpers for ChoreBoard.

Structure:
    * get_logger - factory returning module loggers with baseline configuration.
    * configure_root_logger - optional helper to adjust global logging level.

Usage:
    Modules import ``get_logger`` and keep a module-level ``LOGGER``. The root
    handler is installed exactly once, preventing duplicate handlers when the
    web application is reloaded in development. The CLI calls
    ``configure_root_logger`` with the configured level before serving.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False


def configure_root_logger(level: Optional[Union[int, str]] = None) -> None:
    """Configure the root logger with a debugging friendly formatter.

    Passing ``level`` after the first call only adjusts the root level.
    """

    global _LOGGER_INITIALISED
    root_logger = logging.getLogger()
    if _LOGGER_INITIALISED:
        if level is not None:
            root_logger.setLevel(level)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(logging.INFO if level is None else level)
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    configure_root_logger()
    return logging.getLogger(name)
