"""Structured logging configuration for surveyreport."""

import logging
import sys


def get_logger(name: str) -> logging.Logger:
    """Get a namespaced logger for a surveyreport module.

    Args:
        name: Module name (e.g., 'surveyreport.rendering.engine')

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def configure_logging(
    level: int = logging.INFO,
    fmt: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
) -> None:
    """Configure root surveyreport logging.

    Args:
        level: Logging level (default INFO)
        fmt: Log format string
    """
    logger = logging.getLogger("surveyreport")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    logger.setLevel(level)
