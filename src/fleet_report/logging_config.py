"""
Logging configuration for Fleet Report.

Library modules log through ``logging.getLogger(__name__)``; the CLI calls
``setup_logging`` once the report configuration is known.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Route fleet_report logging to stderr through rich, and optionally to a file.

    Args:
        verbosity: One of ``quiet``, ``normal`` or ``verbose`` (see ReportConfig)
        log_file: Optional path; records are appended in plain text

    Returns:
        The configured ``fleet_report`` logger
    """
    level = LEVELS.get(verbosity, logging.WARNING)
    verbose = level == logging.DEBUG

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    # Replace handlers from an earlier call in the same process
    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)

    logger = logging.getLogger("fleet_report")
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``fleet_report`` namespace (``None`` gives the root one)."""
    if name is None:
        return logging.getLogger("fleet_report")
    if not name.startswith("fleet_report"):
        name = f"fleet_report.{name}"
    return logging.getLogger(name)
