"""
Venue Calendar - Centralized Logging Configuration
===================================================

Provides the logging setup shared by the engine, the services and the API:
- RotatingFileHandler so logs never fill the disk
- Structured format with timestamp, level, module and function
- Separate handlers for console (dev) and files (prod)

Usage:
    from logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Example message")
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Project base directory
BASE_DIR = Path(os.path.abspath(os.path.dirname(__file__)))
LOG_DIR = Path(os.getenv("VENUE_CALENDAR_LOG_DIR", str(BASE_DIR / "logs")))
ENVIRONMENT = os.getenv("VENUE_CALENDAR_ENV", "development")

ROOT_LOGGER_NAME = "venue_calendar"

# Rotation
MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _ensure_log_directory():
    """Creates the log directory if it does not exist."""
    if not LOG_DIR.exists():
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        # Keep the empty directory tracked by git
        gitkeep = LOG_DIR / ".gitkeep"
        gitkeep.touch(exist_ok=True)


def setup_logging(environment: str = ENVIRONMENT) -> logging.Logger:
    """
    Configures logging for the whole application.

    Args:
        environment: "development" or "production"

    Returns:
        The configured application root logger
    """
    _ensure_log_directory()

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)

    # Already configured (avoid duplicated handlers)
    if root_logger.handlers:
        return root_logger

    root_logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # === Console Handler ===
    console_handler = logging.StreamHandler()
    console_level = logging.INFO if environment == "production" else logging.DEBUG
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # === File Handler with rotation ===
    file_handler = RotatingFileHandler(
        LOG_DIR / "venue_calendar.log",
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # === Error File Handler (errors only) ===
    error_handler = RotatingFileHandler(
        LOG_DIR / "venue_calendar_errors.log",
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding='utf-8'
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)
    root_logger.addHandler(error_handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Returns a child of the application logger.

    Args:
        name: Module name (use __name__)

    Example:
        logger = get_logger(__name__)
        logger.info("Operation completed")
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        setup_logging()

    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# Initialize on import
_root_logger = setup_logging()
