"""
Logging setup for the "askari" logger hierarchy.

Every module logs through ``logging.getLogger("askari.<area>")``. This
module attaches a single stdout handler to the "askari" root so those
loggers share one format regardless of how the app is launched
(uvicorn, the CLI scripts, or tests).

Log Format:
===========
    [2025-01-31 09:30:00] INFO [askari.guardtour] GET /sites -> 200
"""

import logging
import sys

LOGGER_NAME = "askari"
LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the "askari" logger once.

    Calling this again only updates the level; no duplicate handlers are
    added.

    Args:
        level: Logging level name (e.g. "INFO", "DEBUG")

    Returns:
        The configured "askari" logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    # uvicorn installs its own root handler; avoid double printing
    logger.propagate = False
    return logger
