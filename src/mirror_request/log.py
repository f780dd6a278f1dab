"""Logging setup for scripts and the command-line interface."""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """Send engine logs to stderr.

    ``level`` falls back to ``MIRROR_REQUEST_LOG_LEVEL`` (default ``INFO``).
    """
    if level is None:
        level = os.getenv("MIRROR_REQUEST_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("mirror_request")
    root.setLevel(level)
    root.handlers = [handler]
