"""Centralized logging setup for the sampling stage.

Usage in any module:
    from keysample.logger import get_logger
    logger = get_logger(__name__)
    logger.info("Task started")
"""
import logging
import sys
from typing import Optional

from keysample.paths import LOGS_DIR

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str, log_file: Optional[str] = "pipeline.log") -> logging.Logger:
    """Return a logger that writes to stdout and to a file in the logs directory.

    Args:
        name: Logger name (use __name__ in calling module).
        log_file: File name inside LOGS_DIR, or None for console only.

    Returns:
        Configured Logger instance.
    """
    logger = logging.getLogger(name)

    # Avoid adding duplicate handlers if logger already configured
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    fmt = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    # --- Console handler (INFO and above) ---
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(fmt)
    logger.addHandler(console)

    # --- File handler (DEBUG and above) ---
    if log_file:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOGS_DIR / log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)

    return logger
