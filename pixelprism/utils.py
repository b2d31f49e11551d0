"""Logging helpers and small utilities for PixelPrism."""

import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "PIXELPRISM_LOG_LEVEL"


# Setup logging
def setup_logging(level: str = "INFO", log_file: Optional[str] = None,
                  console: bool = True) -> logging.Logger:
    """Setup logging configuration for PixelPrism."""
    logger = logging.getLogger("pixelprism")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Clear existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def default_log_level() -> str:
    """Log level requested through the environment, INFO otherwise."""
    level = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        return "INFO"
    return level


def get_logger(name: str = "pixelprism") -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def clamp(val, lo, hi):
    """Clamp a value between low and high bounds."""
    return max(lo, min(hi, val))
