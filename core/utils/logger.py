"""Centralized logging configuration for the launcher."""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO", log_file: Optional[str] = None, verbose: bool = False
) -> None:
    """Setup console and optional file logging for the whole process.

    Console output goes to stderr; stdout is reserved for the instance
    endpoint so the tool can be used in scripts.

    Examples:
        # Console only
        setup_logging()

        # Console + file (written to logs/launcher.log)
        setup_logging("DEBUG", "launcher.log")
    """
    if verbose:
        level = "DEBUG"
    try:
        numeric_level = getattr(logging, level.upper())
    except AttributeError:
        numeric_level = logging.INFO  # fallback to INFO

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path("logs").mkdir(exist_ok=True)
        handlers.append(logging.FileHandler(f"logs/{log_file}"))

    logging.basicConfig(
        level=numeric_level, format=LOG_FORMAT, handlers=handlers, force=True
    )
    # botocore is chatty at DEBUG
    logging.getLogger("botocore").setLevel(max(numeric_level, logging.INFO))


def get_infrastructure_logger(module_name: str) -> logging.Logger:
    """Get logger for infrastructure modules."""
    return logging.getLogger(f"infrastructure.{module_name}")
