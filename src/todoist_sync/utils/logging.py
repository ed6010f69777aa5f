"""Logging configuration for the Todoist sync client."""

import logging
from pathlib import Path

from todoist_sync.utils.storage import DEFAULT_CONFIG_DIR

LOG_FILE_NAME = "todoist-sync.log"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(name)s - %(levelname)s - %(message)s"

# Loggers too chatty at INFO; httpx logs every request
QUIET_LOGGERS = ("httpx", "httpcore")


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(log_level: int = logging.INFO, config_dir: Path | None = None) -> Path:
    """Send log records to a file in the config directory and to stderr.

    The console only shows warnings unless ``log_level`` is DEBUG, since the
    CLI prints its own output. Calling this again replaces the handlers.

    Args:
        log_level: Level for the log file, e.g. logging.DEBUG with --verbose.
        config_dir: Directory holding the log file. Defaults to ~/.todoist-sync/

    Returns:
        Path of the log file.
    """
    config_dir = config_dir or DEFAULT_CONFIG_DIR
    config_dir.mkdir(parents=True, exist_ok=True)
    log_file = config_dir / LOG_FILE_NAME

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(log_level)
    root_logger.addHandler(_handler(logging.FileHandler(log_file), log_level, FILE_FORMAT))
    console_level = log_level if log_level <= logging.DEBUG else logging.WARNING
    root_logger.addHandler(_handler(logging.StreamHandler(), console_level, CONSOLE_FORMAT))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    return log_file
