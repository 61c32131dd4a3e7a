"""Extract command implementation for tar archives.

This module contains the ExtractCommand class that extracts a tar or
tar.gz archive, read from a file or from standard input, into a
destination directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tarstream.commands.command import Command
from tarstream.config import ExtractConfig
from tarstream.extract_manager import STDIN_PATH, ExtractManager


class ExtractCommand(Command):
    """Command to extract a tar or tar.gz archive."""

    def __init__(
        self,
        config: ExtractConfig,
        file_path: str,
        destination: str | None = None,
        show_progress: bool = True,
    ) -> None:
        """Initialize ExtractCommand.

        Args:
            config (ExtractConfig): Extraction configuration object.
            file_path (str): Archive to extract, or ``-`` for stdin.
            destination (str | None): Destination directory. Defaults to the
                configured one.
            show_progress (bool): Draw a progress bar for file input.

        """
        self.config: ExtractConfig = config
        self.file_path: str = file_path
        self.destination: str | None = destination
        self.show_progress: bool = show_progress
        self.logger: logging.Logger = logging.getLogger(__name__)
        self.manager: ExtractManager = ExtractManager()

    def _resolve_destination(self) -> Path | None:
        if self.destination:
            return Path(self.destination).expanduser()
        if self.file_path == STDIN_PATH:
            if self.config.extract_folder:
                return Path(self.config.extract_folder).expanduser()
            return None
        return self.config.destination_for(self.file_path)

    def execute(self) -> bool:
        """Extract the archive into the destination directory.

        Returns:
            bool: True if extraction succeeded, False otherwise.

        """
        destination = self._resolve_destination()
        if destination is None:
            self.logger.error(
                "A destination is required when reading from stdin"
            )
            return False

        return self.manager.execute_extract(
            self.file_path, destination, show_progress=self.show_progress
        )
