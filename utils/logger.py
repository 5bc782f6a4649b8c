"""
Shared logger utility for the inventory dashboard.
Provides a consistent logger configuration for all modules.
"""

import logging
import os


def get_logger(name: str | None = None, level: str | int | None = None) -> logging.Logger:
    """
    Returns a logger with the specified name, configured with the project's
    standard format. The level comes from `level`, then the
    ``NEXUSINV_LOG_LEVEL`` environment variable, then INFO.
    If no name is provided, returns the root logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level or os.getenv("NEXUSINV_LOG_LEVEL", "INFO").upper())
    return logger
