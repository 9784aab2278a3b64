"""Logging setup shared by library entry points."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure root logging to stdout.

    Args:
        level: Log level name. Defaults to LOG_LEVEL from settings.
    """
    if level is None:
        from paylink.core.config import settings

        level = settings.log_level

    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
