"""
Logging for duplo.

Records go to stderr through rich so that a report written to stdout
stays clean, and optionally to a plain log file as well.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "duplo"

LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach the stderr handler (and a file handler when ``log_file`` is set)
    to the ``duplo`` logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        verbosity: One of ``quiet``, ``normal`` or ``verbose``
        log_file: File that receives every record at or above the level

    Returns:
        The ``duplo`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    verbose = verbosity == "verbose"
    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_path=verbose,
        )
    )

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logger.addHandler(file_handler)

    set_verbosity(verbosity)
    return logger


def set_verbosity(verbosity: str) -> None:
    """Change the level of the ``duplo`` logger, keeping its handlers."""
    logging.getLogger(ROOT_LOGGER).setLevel(LEVELS[verbosity])


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, placed under the ``duplo`` namespace."""
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
