"""
Logger Module

Provides a centralized logging setup that outputs to the console and,
when configured, to a log file.

Modules grab their logger with :func:`get_logger` at import time; handlers
are attached later by :func:`configure_logging`, once the settings module is
known (``create_app`` and the scripts).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_ROOT_NAME = "hrms_lite"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """(Re)attach handlers to the package root logger.

    Args:
        level: Console level name, e.g. "INFO" or "DEBUG".
        log_file: Optional file path; the file handler logs at DEBUG.

    Returns:
        The package root logger.
    """
    root = logging.getLogger(_ROOT_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.setLevel(logging.DEBUG)
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        try:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        except OSError as e:
            root.warning("Cannot open log file %s: %s", log_file, e)

    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the package root, e.g. ``get_logger("attendance")``."""
    if name.startswith(_ROOT_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_NAME}.{name}")
