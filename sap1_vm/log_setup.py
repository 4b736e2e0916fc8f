"""
Logging setup for the SAP-1 tools.

Library modules only call logging.getLogger(__name__); handlers are
attached here, by the CLI, never on import.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "sap1_vm"

FILE_FORMAT = ("%(asctime)s | %(levelname)-7s | %(name)s | "
               "%(funcName)s:%(lineno)d | %(message)s")


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Configure and return the package logger.

    Console gets a RichHandler at `level`. If `log_file` is given, a file
    handler captures everything from DEBUG up with the long format.
    Calling again replaces the handlers from the previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG if log_file else level)
    logger.propagate = False

    ch = RichHandler(
        level=level,
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logger.addHandler(ch)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(fh)
        logger.info("Log file: %s", log_file)

    return logger
