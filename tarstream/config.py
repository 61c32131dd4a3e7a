"""Configuration management for tarstream.

Handles loading, saving, and validation of the extraction configuration
using an INI (.conf) file. Comments are supported in the config file.
"""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
EXTRACTED_SUFFIX = "-extracted"


@dataclass
class ExtractConfig:
    """Configuration data for extraction (log level, destination root).

    ``extract_folder`` left empty means every archive is extracted next to
    itself into ``<archive name>-extracted``.
    """

    config_dir: str = "~/.config/tarstream"
    log_level: str = "INFO"
    extract_folder: str = ""

    def __post_init__(self) -> None:
        """Normalize the log level after initialization."""
        self.log_level = self._validate_log_level(self.log_level)

    def _validate_log_level(self, level: str) -> str:
        """Validate and normalize the log level string.

        Args:
            level (str): The log level string to validate.

        Returns:
            str: A valid log level string (uppercase).

        """
        level_upper = level.upper()
        if level_upper not in VALID_LOG_LEVELS:
            logger.warning("Invalid log level '%s', defaulting to INFO", level)
            return "INFO"
        return level_upper

    def get_log_level(self) -> int:
        """Convert the string log level to logging module constant."""
        return getattr(logging, self.log_level, logging.INFO)

    @property
    def config_path(self) -> Path:
        """Return the full path to the config file (INI format)."""
        return Path(self.config_dir).expanduser() / "config.conf"

    def destination_for(self, archive_path: str | Path) -> Path:
        """Return the destination directory for ``archive_path``.

        Args:
            archive_path: Archive being extracted.

        Returns:
            Path: ``extract_folder`` when configured, otherwise the archive
            path without its last suffix plus ``-extracted``.
        """
        if self.extract_folder:
            return Path(self.extract_folder).expanduser()
        archive = Path(archive_path)
        return Path(f"{archive.with_suffix('')}{EXTRACTED_SUFFIX}")

    def save(self) -> None:
        """Save current configuration to the config file in INI format.

        Explanatory comments are written for user guidance.
        """
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with self.config_path.open("w", encoding="utf-8") as f:
            f.write("[DEFAULT]\n")

            f.write("# Logging level for the application.\n")
            f.write(
                "#   Valid levels: DEBUG, INFO, WARNING, ERROR, CRITICAL\n"
            )
            f.write(f"log_level = {self.log_level}\n\n")

            f.write("# Directory where this config file is saved.\n")
            f.write("#   Default: ~/.config/tarstream\n")
            f.write(f"config_dir = {self.config_dir}\n\n")

            f.write("# Directory archives are extracted into.\n")
            f.write(
                "#   Leave empty to extract next to the archive into\n"
            )
            f.write("#   <archive name>-extracted.\n")
            f.write(f"extract_folder = {self.extract_folder}\n")

        logger.info("Configuration saved to %s", self.config_path)

    @classmethod
    def load(cls, config_path: Path | None = None) -> ExtractConfig:
        """Load config from INI file or fall back to defaults if missing.

        Args:
            config_path: Optional custom config file. If None, uses the
                default location.
        """
        default_config = cls()
        path = config_path or default_config.config_path

        if not path.exists():
            return default_config

        parser = configparser.ConfigParser()
        try:
            parser.read(path, encoding="utf-8")
            section = parser["DEFAULT"]
            return cls(
                config_dir=section.get(
                    "config_dir", default_config.config_dir
                ),
                log_level=section.get("log_level", default_config.log_level),
                extract_folder=section.get(
                    "extract_folder", default_config.extract_folder
                ),
            )
        except (OSError, configparser.Error):
            logger.exception("Error reading config file")
            logger.warning("Using default configuration")
            return default_config

    @classmethod
    def create_default(cls, config_path: Path | None = None) -> ExtractConfig:
        """Create and save default configuration.

        Args:
            config_path: Optional custom config path. If None, uses default
                location.

        Returns:
            ExtractConfig: Newly created config instance with defaults.
        """
        config = cls()
        if config_path:
            config.config_dir = str(config_path.parent)
        config.save()
        logger.info("Created default configuration at %s", config.config_path)
        return config
