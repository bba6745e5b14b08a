"""
Logging setup for SiteHarvest.

Every module logs through the ``SiteHarvest`` logger::

    from site_harvest.logger import logger

Console records go to stderr so that ``site-harvest crawl`` can print the
JSON payload on stdout. The CLI calls :func:`init_logging` again once the
``--log-*`` options are known.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

__all__ = ("logger", "init_logging", "build_handlers", "DEFAULT_FORMAT", "LOGGER_NAME")

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME = "SiteHarvest"

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


def build_handlers(log_file: Union[str, Path, None], log_format: str) -> List[logging.Handler]:
    """stderr handler, plus a rotating file handler when *log_file* is given."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                str(log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def init_logging(
    level: Union[int, str] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Swap the project logger's handlers for fresh ones and set *level*."""
    lg = logging.getLogger(LOGGER_NAME)
    for old in list(lg.handlers):
        lg.removeHandler(old)
        old.close()
    for handler in build_handlers(log_file, log_format):
        lg.addHandler(handler)
    lg.setLevel(level)
    # records stay out of the root logger (and out of stdout)
    lg.propagate = False
    return lg


logger: logging.Logger = init_logging()
