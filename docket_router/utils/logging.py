"""Structured logging configuration."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

# The UI polls /state every frame; per-request access lines drown the session log.
_NOISY_LOGGERS = ("uvicorn.access",)


def setup_logging(level: str = "INFO", stream: TextIO | None = None, access_log: bool = False) -> None:
    """Configure the root logger for session output.

    Logs go to *stream* (stdout by default); the headless CLI passes stderr
    so text frames on stdout stay readable.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)-5s] %(name)-25s | %(message)s",
        datefmt="%H:%M:%S",
    ))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    if not access_log:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
