"""Logging configuration and setup for tarstream.

This module provides centralized logging configuration. It handles file
rotation, console output, and formatting consistently across the
application.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

APP_NAME = "tarstream"
LOG_FILE_MAX_BYTES = 1024 * 1024  # 1MB
LOG_FILE_BACKUP_COUNT = 3


def get_xdg_config_home() -> Path:
    """Return the XDG config home directory path.

    Returns:
        Path: XDG config home directory or fallback to ~/.config

    """
    xdg_config_home: str | None = os.getenv("XDG_CONFIG_HOME")
    if not xdg_config_home or not Path(xdg_config_home).is_absolute():
        return Path.home() / ".config"
    return Path(xdg_config_home)


def get_log_file_path() -> Path:
    """Return the path of the application log file."""
    return get_xdg_config_home() / APP_NAME / "logs" / f"{APP_NAME}.log"


def setup_application_logging(log_level: int = logging.INFO) -> None:
    """Configure file and console logging for tarstream.

    File logs rotate and go to the XDG config directory; the console only
    receives errors.

    Args:
        log_level (int): The logging level to use. Defaults to INFO.

    """
    log_file_path: Path = get_log_file_path()
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_file_path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUP_COUNT,
    )
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
        )
    )
    file_handler.setLevel(log_level)

    # Console handler (errors only)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR)
    console_handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.getLogger(__name__).info(
        "Logging configured with %s level", logging.getLevelName(log_level)
    )


def setup_basic_logging() -> None:
    """Configure basic logging for the phase before config is loaded."""
    logging.basicConfig(level=logging.INFO)
