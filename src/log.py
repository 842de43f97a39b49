"""Log utilities."""

import logging
from rich.logging import RichHandler


def get_logger(name: str, level: int = logging.DEBUG) -> logging.Logger:
    """Retrieve logger with the provided name.

    The logger writes through a single rich handler and does not propagate
    to the root logger, so repeated calls never duplicate output.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers = [RichHandler(show_path=False)]
    logger.propagate = False
    return logger
