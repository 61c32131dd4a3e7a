"""Simple ASCII progress bar for extraction.

Progress is measured on the bytes consumed from the input archive, which is
the only size known up front for a compressed stream.
"""

from __future__ import annotations

import sys
import time
from typing import IO, TextIO

from tarstream.utils.format import format_duration, format_size


class SimpleProgressBar:
    """Simple ASCII progress bar [====     ] 45% 1.20 MB/2.50 MB 00:12."""

    def __init__(
        self, total_size: int, width: int = 30, output: TextIO | None = None
    ) -> None:
        """Initialize progress bar.

        Args:
            total_size: Total size in bytes for progress calculation
            width: Width of the progress bar in characters (default: 30)
            output: Stream to draw on (default: stdout)

        """
        self.total_size: int = total_size
        self.current_size: int = 0
        self.width: int = width
        self.output: TextIO = output or sys.stdout
        self.last_percentage: int = -1
        self.start_time: float = time.time()

    def _render(self, percentage: int) -> str:
        filled = min(int(self.width * percentage / 100), self.width)
        bar = "=" * filled + " " * (self.width - filled)
        elapsed = format_duration(time.time() - self.start_time)
        return (
            f"\r[{bar}] {percentage:3d}% "
            f"{format_size(self.current_size)}/{format_size(self.total_size)}"
            f" {elapsed}"
        )

    def update(self, bytes_added: int) -> None:
        """Update progress and redraw bar.

        Args:
            bytes_added: Number of bytes to add to current progress

        """
        self.current_size += bytes_added
        if self.total_size <= 0:
            return

        percentage = min(int(self.current_size * 100 / self.total_size), 100)
        # Only redraw when the percentage changes
        if percentage == self.last_percentage:
            return
        self.last_percentage = percentage

        self.output.write(self._render(percentage))
        self.output.flush()

    def finish(self) -> None:
        """Complete the progress bar and move to new line."""
        if self.total_size > 0:
            self.current_size = self.total_size
            self.output.write(self._render(100))
        self.output.write("\n")
        self.output.flush()


class ProgressReader:
    """Read-through wrapper reporting consumed bytes to a progress bar."""

    def __init__(self, stream: IO[bytes], progress: SimpleProgressBar) -> None:
        self._stream = stream
        self._progress = progress

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        if data:
            self._progress.update(len(data))
        return data
