"""
Logging setup shared by the API process and tooling.

Usage:
    import logging
    logger = logging.getLogger(__name__)

    from qa_forum.core.logging_config import setup_logging
    setup_logging("DEBUG")
"""
from __future__ import annotations
import logging
import sys
import threading
from typing import Union

DEFAULT_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

_initialized = False
_lock = threading.Lock()


def setup_logging(level: Union[int, str] = logging.INFO, fmt: str = DEFAULT_FORMAT) -> None:
    """Attach a stderr handler to the package logger. Safe to call repeatedly."""
    global _initialized

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    with _lock:
        root = logging.getLogger("qa_forum")
        root.setLevel(level)
        if _initialized:
            return

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)
        _initialized = True
