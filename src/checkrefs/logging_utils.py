"""Logging configuration utilities for the reference checker."""

import logging
import os
import sys
from typing import Optional

_LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure application-wide logging once.

    Log records go to stderr; stdout carries workflow commands.
    """
    if logging.getLogger().handlers:
        return

    log_level = level or os.getenv("LOG_LEVEL", "INFO")
    logging.basicConfig(level=log_level.upper(), format=_LOG_FORMAT, stream=sys.stderr)
