# === FILE: doc_scout/logger.py ===
"""Logging setup for **DocScout**.

Everything in the package logs through the ``"DocScout"`` logger (or one of its
children, see :func:`get_logger`), so a single call to :func:`configure`
decides where crawl progress goes:

* console output goes to *stderr*, which keeps stdout free for the JSON
  summaries printed by the CLI;
* an optional log file is rotated at 5 MiB, three backups are kept.

Usage::

    from doc_scout.logger import logger
    logger.info("Page Count: %d", count)
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterator, Optional, Union

LOGGER_NAME: Final[str] = "DocScout"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

_Level = Union[int, str]


def _build_handlers(fmt: str, log_file: Optional[Union[str, Path]]) -> Iterator[logging.Handler]:
    formatter = logging.Formatter(fmt)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    yield console

    if log_file is None:
        return
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    rotating = RotatingFileHandler(
        path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
    )
    rotating.setFormatter(formatter)
    yield rotating


def configure(
    *,
    level: _Level = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Apply *level*, *log_file* and *log_format* to the project logger.

    With ``replace_handlers=False`` the new handlers are added next to the
    existing ones; otherwise the old handlers are closed and dropped.
    """
    project = logging.getLogger(LOGGER_NAME)
    project.setLevel(level)

    if replace_handlers:
        for old in list(project.handlers):
            project.removeHandler(old)
            old.close()

    for handler in _build_handlers(log_format, log_file):
        project.addHandler(handler)

    # records stop at the project logger; the root logger stays untouched
    project.propagate = False
    return project


def init_logging(
    level: _Level = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """CLI shortcut for :func:`configure` with handler replacement."""
    return configure(level=level, log_file=log_file, log_format=log_format)


def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    """Project logger, or its ``DocScout.<suffix>`` child."""
    return logging.getLogger(f"{LOGGER_NAME}.{suffix}" if suffix else LOGGER_NAME)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "get_logger", "LOGGER_NAME"]
