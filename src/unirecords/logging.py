"""Log setup for unirecords.

Every module logs through ``logging.getLogger(__name__)``, so all records end
up under the ``unirecords`` logger. What gets logged:

    INFO     record inserts and in-place updates, record file creation,
             rejected logins, leaderboard runs
    WARNING  partial trailing records, files that cannot be opened for counting
    DEBUG    appends, rewrites, rows skipped by reports

Logs go to a size-rotated file, by default ``<data dir>/logs/unirecords.log``
so that the log stays next to the record files it describes.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from unirecords.config import LoggingConfig

ROOT_LOGGER = "unirecords"
LOG_FILE = "unirecords.log"
MAX_BYTES = 2 * 1024 * 1024
BACKUP_COUNT = 3

LOG_DIR_ENV = "UNIRECORDS_LOG_DIR"
LOG_LEVEL_ENV = "UNIRECORDS_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_dir: str | Path,
    level: str = "INFO",
    console: bool = False,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
) -> logging.Logger:
    """Attach a rotating file handler (and optionally stderr) to the root logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        log_dir: Directory for ``unirecords.log``; created if missing.
        level: Level name; unknown names fall back to INFO.
        console: Also write to stderr.
        max_bytes: Size at which the file is rotated.
        backup_count: Rotated files to keep.

    Returns:
        The ``unirecords`` logger.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_dir / LOG_FILE, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging to %s at %s", log_dir / LOG_FILE, logging.getLevelName(log_level))
    return logger


def configure_logging(
    settings: LoggingConfig,
    log_dir: Path | None,
    data_dir: Path,
    verbose: bool = False,
) -> logging.Logger:
    """Set up logging for one CLI run.

    Precedence, highest first: ``verbose`` (DEBUG on stderr), the
    ``UNIRECORDS_LOG_*`` environment variables, the ``logging`` section of
    the config file, then the defaults (INFO, file only, under the data dir).

    Args:
        settings: The ``logging`` section of the configuration.
        log_dir: Configured log directory, already resolved, or None.
        data_dir: Data directory in use for this run.
        verbose: The CLI's ``-v`` flag.
    """
    directory = os.environ.get(LOG_DIR_ENV) or log_dir or data_dir / "logs"
    level = os.environ.get(LOG_LEVEL_ENV) or settings.level or "INFO"
    if verbose:
        level = "DEBUG"
    return setup_logging(directory, level=level, console=verbose or settings.console)
