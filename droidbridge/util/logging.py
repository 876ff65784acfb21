"""Utility functions for logging setup."""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "droidbridge"

# Every adb/fastboot invocation and its failure is logged here at DEBUG.
COMMAND_LOGGER = f"{ROOT_LOGGER}.adb.executor"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: Optional[Console] = None,
    trace_commands: bool = False,
) -> logging.Logger:
    """Set up logging with Rich formatting on the console.

    With ``trace_commands`` the executed tool command lines are shown on the
    console even when the rest of the package logs at a higher level.
    """

    if console is None:
        console = Console(stderr=True)

    numeric_level = getattr(logging, level.upper())
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(numeric_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(logging.DEBUG if trace_commands else numeric_level)
    console_handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s"))
    logger.addHandler(console_handler)

    # NOTSET defers to the package level set above.
    logging.getLogger(COMMAND_LOGGER).setLevel(logging.DEBUG if trace_commands else logging.NOTSET)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
