"""CLI orchestration utilities for tarstream.

This module contains helpers for the CLI layer, mainly config and logging
initialization.
"""

from __future__ import annotations

import logging

from tarstream.config import ExtractConfig
from tarstream.logger import (
    setup_application_logging,
    setup_basic_logging,
)

logger = logging.getLogger(__name__)


def initialize_config() -> ExtractConfig:
    """Initialize configuration and logging for the application.

    Returns:
        ExtractConfig: Loaded or newly created config instance.
    """
    config = ExtractConfig.load()

    if not config.config_path.exists():
        # Basic logging for initial setup
        setup_basic_logging()
        logger.info("No configuration found. Creating defaults.")
        config = ExtractConfig.create_default()
        logger.info("To edit: nano %s", config.config_path)

    setup_application_logging(config.get_log_level())
    return config
