"""Logging configuration for the rental recommender."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

# Name given to every handler installed by setup_logging
HANDLER_NAME = "rental_recommender"


def setup_logging(log_level: str = None) -> None:
    """
    Configure logging for the CLI and library consumers.

    Safe to call more than once: handlers from an earlier call are replaced.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
                   Defaults to LOG_LEVEL env var or INFO.
    """
    level = log_level or os.getenv("LOG_LEVEL", "INFO")

    # Create formatter
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.set_name(HANDLER_NAME)

    # Optional file handler
    log_dir = Path("./logs")
    file_handler = None
    if log_dir.exists():
        log_file = log_dir / f"rental_recommender_{datetime.now():%Y%m%d}.log"
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.set_name(HANDLER_NAME)

    # Configure root logger
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.addHandler(console_handler)
    if file_handler:
        root_logger.addHandler(file_handler)
