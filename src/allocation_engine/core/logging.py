"""Logging setup for the allocation engine.

Library modules only fetch named loggers under ``allocation_engine``.  The CLI
decides the level and where records go: stderr through the root handler, plus
optional per-run log files attached to the package logger.
"""

from __future__ import annotations

import logging
from pathlib import Path

__all__ = [
    "LOG_FORMAT",
    "PACKAGE_LOGGER",
    "add_file_handler",
    "configure_logging",
    "get_logger",
    "resolve_level",
]

PACKAGE_LOGGER = "allocation_engine"
LOG_FORMAT = "%(asctime)s,%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_FILE_HANDLERS: dict[Path, logging.Handler] = {}


def resolve_level(level: int | str) -> int:
    """Accept ``logging.INFO`` or a name such as ``"info"``."""

    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level '{level}'")
    return value


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Set the package log level and install a stderr handler if none exists.

    An already configured root logger is left untouched; the package level is
    applied either way.
    """

    logging.basicConfig(format=LOG_FORMAT, datefmt=_DATE_FORMAT)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolve_level(level))
    return logger


def add_file_handler(path: Path, level: int | str = logging.INFO) -> logging.Handler:
    """Append package records to ``path``; one handler per resolved path."""

    resolved = Path(path).expanduser().resolve()
    handler = _FILE_HANDLERS.get(resolved)
    if handler is not None:
        return handler
    resolved.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(resolved, encoding="utf-8")
    handler.setLevel(resolve_level(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=_DATE_FORMAT))
    logging.getLogger(PACKAGE_LOGGER).addHandler(handler)
    _FILE_HANDLERS[resolved] = handler
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
