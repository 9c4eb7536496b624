"""Logging setup for the ``jumpstream`` logger tree."""

import logging
import sys
from pathlib import Path

NAMESPACE = "jumpstream"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that log per frame at INFO
QUIET_LOGGERS = ("mediapipe", "absl")


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Attach stderr (and optionally file) handlers to the package logger.

    Calling it again replaces the handlers from the previous call. Stdout is
    left alone so that CLI output can be piped.

    Args:
        level: Level name; unknown names fall back to INFO
        log_file: Also append records to this file, creating parent dirs

    Returns:
        The configured package logger
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    package_logger = logging.getLogger(NAMESPACE)
    package_logger.setLevel(log_level)
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()

    package_logger.addHandler(_handler(logging.StreamHandler(sys.stderr), log_level))
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        package_logger.addHandler(_handler(logging.FileHandler(path), log_level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, placed under the package namespace."""
    if name != NAMESPACE and not name.startswith(NAMESPACE + "."):
        name = f"{NAMESPACE}.{name}"
    return logging.getLogger(name)
