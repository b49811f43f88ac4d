"""
cfmeta Logging Configuration

Configures logging based on environment variables:
- CFMETA_DEBUG: Enable debug logging (default: false)
- CFMETA_LOG_FILE: Optional log file path (default: stderr only)
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    debug: Optional[bool] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure logging for cfmeta.

    Args:
        debug: Enable debug level. Defaults to CFMETA_DEBUG env var.
        log_file: Log file path. Defaults to CFMETA_LOG_FILE env var.
                  When unset, everything goes to stderr.

    Returns:
        Root logger for cfmeta
    """
    if debug is None:
        debug = os.environ.get("CFMETA_DEBUG", "").lower() in ("true", "1", "yes")
    if log_file is None:
        log_file = os.environ.get("CFMETA_LOG_FILE") or None

    level = logging.DEBUG if debug else logging.INFO

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    logger = logging.getLogger("cfmeta")
    logger.setLevel(level)

    # Clear existing handlers so repeated CLI runs in one process don't stack
    logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    if log_file:
        # If logging to file, only show warnings on stderr
        stderr_handler.setLevel(logging.WARNING)
    else:
        stderr_handler.setLevel(level)
    logger.addHandler(stderr_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
        logger.debug(f"Logging to file: {log_file}")

    return logger


def get_logger(component: str) -> logging.Logger:
    """
    Get a logger for a specific component.

    Args:
        component: Component name (e.g., "parser", "extractor", "cli")

    Returns:
        Logger instance for the component
    """
    return logging.getLogger(f"cfmeta.{component}")
