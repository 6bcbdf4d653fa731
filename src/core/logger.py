"""Application logger setup."""

import logging
import sys

from src.core.config import settings

# Every module logger is created with logging.getLogger(__name__), so they
# all live under the top-level package name.
ROOT_LOGGER_NAME = "src"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the application logger once and return it."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel((level or settings.log_level).upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(module)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(handler)

    return logger
