"""
Logging setup for estatesearch entry points.

Only the CLIs and the API server call ``setup_logging``; library modules
just do ``logger = logging.getLogger(__name__)`` and inherit the handlers
attached to the ``estatesearch`` logger.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at INFO/DEBUG
_QUIET_LOGGERS = ("urllib3", "requests")


def _rotating_file_handler(log_dir: Path, log_file: str) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename=log_dir / log_file,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )


def setup_logging(
    log_dir: Path | None = None,
    level: int = logging.INFO,
    log_file: str = "estatesearch.log",
) -> None:
    """
    Attach console and (optionally) rotating file handlers.

    The console handler writes to stderr so that the search CLI's result
    listing on stdout can be piped. Handlers are attached once; a later call
    only moves the logger and its existing handlers to the new level.

    Args:
        log_dir: Directory for the log file. None disables file logging.
        level: Minimum level for the ``estatesearch`` logger and its handlers.
        log_file: File name inside log_dir.
    """
    package_logger = logging.getLogger("estatesearch")
    package_logger.setLevel(level)
    if package_logger.handlers:
        for handler in package_logger.handlers:
            handler.setLevel(level)
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_dir is not None:
        try:
            handlers.append(_rotating_file_handler(log_dir, log_file))
        except OSError as e:
            package_logger.warning("File logging disabled, cannot write to %s: %s", log_dir, e)

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
