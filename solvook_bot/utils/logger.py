"""
Logging configuration for the Solvook Bot.

Every module creates its logger at import time with ``setup_logger(__name__)``.
Those loggers start from the environment defaults; once the configuration has
been loaded, ``configure_logging`` pushes the configured level, format and
optional log file down to all of them.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from solvook_bot.utils.config import Config

PACKAGE_LOGGER = "solvook_bot"

# Default log format
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DETAILED_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"

# Log levels mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

MAX_LOG_FILE_SIZE = 10 * 1024 * 1024  # 10MB
LOG_FILE_BACKUPS = 5


def _level(log_level: Optional[str]) -> int:
    return LOG_LEVELS.get((log_level or "INFO").upper(), logging.INFO)


def setup_logger(name: str, log_level: Optional[str] = None) -> logging.Logger:
    """
    Set up a module logger writing to the console.

    Args:
        name: Name of the logger (typically __name__)
        log_level: Log level, defaults to ``SOLVOOK_BOT_LOG_LEVEL`` or INFO

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(_level(log_level or os.environ.get("SOLVOOK_BOT_LOG_LEVEL")))

    # Clear existing handlers to avoid duplicates
    if logger.handlers:
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
    logger.addHandler(console_handler)

    return logger


def _bot_loggers() -> List[logging.Logger]:
    return [
        logger
        for name, logger in logging.root.manager.loggerDict.items()
        if name.startswith(PACKAGE_LOGGER) and isinstance(logger, logging.Logger)
    ]


def configure_logging(config: Config) -> None:
    """
    Apply the loaded configuration to every bot logger.

    The level comes from ``config.log_level``. Debug mode switches to the
    detailed format with file and line numbers, and ``config.log_file`` adds a
    rotating file handler under ``config.log_dir``.

    Args:
        config: Application configuration
    """
    level = _level(config.log_level)
    formatter = logging.Formatter(DETAILED_LOG_FORMAT if config.debug_mode else DEFAULT_LOG_FORMAT)

    file_handler = None
    if config.log_file:
        log_dir_path = Path(config.log_dir)
        log_dir_path.mkdir(exist_ok=True, parents=True)
        file_handler = RotatingFileHandler(
            log_dir_path / config.log_file,
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=LOG_FILE_BACKUPS,
        )
        file_handler.setFormatter(formatter)

    for logger in _bot_loggers():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setFormatter(formatter)
        if file_handler is not None:
            logger.addHandler(file_handler)
