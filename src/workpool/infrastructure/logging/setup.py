"""Logging configuration for applications using workpool."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import platformdirs
from rich.console import Console
from rich.logging import RichHandler

# Console output goes to stderr so it does not mix with command output
log_console = Console(file=sys.stderr)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_installed_handlers: list[logging.Handler] = []


def default_log_file() -> Path:
    """``workpool.log`` in the platform's per-user log directory."""
    return Path(platformdirs.user_log_dir("workpool", appauthor=False)) / "workpool.log"


def setup_logging(
    log_level_name: str, console_logging: bool = False, log_file: Path | None = None
) -> Path:
    """Configure logging for workpool.

    By default, logs go to a file in the system-appropriate log directory.
    Console logging can be enabled for debugging.

    Args:
        log_level_name: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_logging: If True, also log to console via Rich
        log_file: Log file to write to instead of the default location

    Returns:
        Path of the log file
    """
    log_level = logging.getLevelName(log_level_name.upper())
    log_file = log_file or default_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Replace handlers from an earlier call, leave everything else alone
    root_logger = logging.getLogger()
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()

    # File handler with rotation (10 MB max, keep 3 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(file_handler)
    _installed_handlers.append(file_handler)

    if console_logging:
        console_handler = RichHandler(
            console=log_console,
            rich_tracebacks=True,
            show_path=False,
        )
        console_handler.setLevel(log_level)
        root_logger.addHandler(console_handler)
        _installed_handlers.append(console_handler)

    # Let handlers filter
    root_logger.setLevel(logging.DEBUG)
    logging.getLogger("workpool").setLevel(log_level)

    return log_file
