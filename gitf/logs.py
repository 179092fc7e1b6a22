"""Logging setup for gitf.

The picker owns the terminal while it runs, so log records only ever go to a
rotating file and never to the console.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

__all__ = ["setup_logging", "get_log_path"]

LOG_FILENAME = "gitf.log"
_CONFIGURED = False
_LOG_PATH: Path | None = None


def setup_logging(
    level: int = logging.WARNING,
    *,
    log_dir: Path | str | None = None,
    max_bytes: int = 512_000,
    backup_count: int = 2,
    force: bool = False,
) -> Path | None:
    """Route the ``gitf`` logger hierarchy to a rotating log file.

    Returns the log file path, or ``None`` when the log directory cannot be
    created; in that case records are dropped.
    """
    global _CONFIGURED, _LOG_PATH
    if _CONFIGURED and not force:
        return _LOG_PATH

    package_logger = logging.getLogger("gitf")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(level)
    package_logger.propagate = False

    target_dir = _resolve_log_dir(log_dir)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        log_path = target_dir / LOG_FILENAME
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    except OSError:
        log_path = None
        handler = logging.NullHandler()

    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    package_logger.addHandler(handler)

    _CONFIGURED = True
    _LOG_PATH = log_path
    return log_path


def get_log_path() -> Path | None:
    return _LOG_PATH


def _resolve_log_dir(log_dir: Path | str | None) -> Path:
    env_override = os.environ.get("GITF_LOG_DIR")
    return Path(log_dir or env_override or user_log_dir("gitf", appauthor=False)).expanduser()
