"""Logging setup shared by all simulation components."""

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logger(name: str, level: Union[str, int, None] = None) -> logging.Logger:
    """Get a configured logger.

    Handlers are attached once per name, so calling this from every
    constructor does not duplicate output.

    Args:
        name: Logger name (usually the class name)
        level: Logging level name or number; None keeps the current level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(f"seeingblue.{name}")

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
        if level is None:
            level = "INFO"

    if level is not None:
        if isinstance(level, str):
            level = level.upper()
        logger.setLevel(level)

    return logger


def set_global_level(level: Union[str, int]) -> None:
    """Set the level on every logger created by setup_logger."""
    if isinstance(level, str):
        level = level.upper()
    for name, logger in logging.root.manager.loggerDict.items():
        if name.startswith("seeingblue.") and isinstance(logger, logging.Logger):
            logger.setLevel(level)
