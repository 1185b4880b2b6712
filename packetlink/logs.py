"""Loggers writing to a file and, optionally, to standard output."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVELS = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class _Formatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__(
            "[%(levelname)s] %(asctime)s:%(msecs)03d %(name)s/(%(process)d:%(thread)d): %(message)s",
            datefmt="%H:%M:%S",
        )


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    try:
        return _LEVELS[level.upper()]
    except KeyError:
        raise ValueError(f"unknown log level {level!r}") from None


def create_logger(
    path: str | Path, name: str, echo: bool, level: str | int = "INFO"
) -> logging.Logger:
    """Return a logger appending to ``path``, also echoing to stdout if asked.

    ``level`` is one of TRACE, DEBUG, INFO, WARNING, ERROR or a numeric level.
    """
    resolved = _resolve_level(level)
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(resolved)
    logger.propagate = False

    formatter = _Formatter()
    file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    if echo:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)
    return logger