"""Extract manager for materializing tar streams onto disk.

This module contains the ExtractManager class that reads a raw or
gzip-compressed tar stream entry by entry and recreates its directories
and files under a destination root.
"""

from __future__ import annotations

import logging
import sys
import tarfile
import time
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, BinaryIO

from tarstream.errors import (
    DirectoryCreateError,
    ExtractError,
    FileCloseError,
    FileCreateError,
    FileWriteError,
    TarParseError,
)
from tarstream.paths import resolve_output_path
from tarstream.restore import RestoreAttempt, restore_metadata
from tarstream.source import READ_ERRORS, detect_source, iter_entries, open_tar
from tarstream.utils.format import format_size
from tarstream.utils.progress_bar import ProgressReader, SimpleProgressBar

STDIN_PATH = "-"
COPY_BUFSIZE = 64 * 1024
DIR_MODE = 0o755

# File creation is retried exactly once, after a fixed delay.
CREATE_ATTEMPTS = 2
CREATE_RETRY_DELAY = 5.0


@dataclass
class ExtractionReport:
    """Summary of a successful extraction.

    Attributes:
        destination: Root the archive was extracted into.
        source_format: Detected envelope (``"tar"`` or ``"tar+gzip"``).
        directories: Number of directory entries materialized.
        files: Number of file entries materialized.
        bytes_written: Total content bytes written to files.
        restore_attempts: Every metadata restore call, failed or not.
    """

    destination: Path
    source_format: str
    directories: int = 0
    files: int = 0
    bytes_written: int = 0
    restore_attempts: list[RestoreAttempt] = field(default_factory=list)

    @property
    def failed_restores(self) -> list[RestoreAttempt]:
        """Restore attempts that did not succeed."""
        return [a for a in self.restore_attempts if not a.succeeded]


class ExtractManager:
    """Manager class for extraction operations.

    Handles format detection, the entry loop, directory and file
    materialization, and best-effort metadata restoration. Any fatal
    condition aborts the whole extraction with an ``ExtractError``;
    entries written before the failure are left on disk.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Initialize ExtractManager.

        Args:
            logger: Logger instance (optional, creates default if not provided)
        """
        self.logger = logger or logging.getLogger(__name__)

    def extract(
        self, stream: IO[bytes] | BinaryIO, destination: str | Path
    ) -> ExtractionReport:
        """Extract a tar or tar.gz stream into ``destination``.

        Args:
            stream: Readable binary stream. Borrowed, never closed.
            destination: Root directory of the destination tree.

        Returns:
            ExtractionReport: Counts and restore attempts of the run.

        Raises:
            ExtractError: On the first unrecoverable error.
        """
        root = Path(destination)
        source = detect_source(stream)
        report = ExtractionReport(destination=root, source_format=source.name)

        with open_tar(source) as archive:
            for member in iter_entries(archive):
                self._extract_entry(archive, member, root, report)

        self.logger.info(
            "Extracted %d files and %d directories to %s",
            report.files,
            report.directories,
            root,
        )
        return report

    def execute_extract(
        self,
        file_path: str | Path,
        destination: str | Path,
        show_progress: bool = True,
    ) -> bool:
        """Execute the complete extraction process.

        Args:
            file_path: Archive file to extract, or ``-`` for stdin
            destination: Root directory of the destination tree
            show_progress: Draw a progress bar for file input

        Returns:
            True if extraction succeeded, False otherwise
        """
        try:
            if str(file_path) == STDIN_PATH:
                report = self.extract(sys.stdin.buffer, destination)
            else:
                report = self._extract_file(
                    Path(file_path), destination, show_progress
                )
        except ExtractError:
            self.logger.exception("Extraction failed")
            return False
        except OSError:
            self.logger.exception("Unexpected error during extraction")
            return False

        self._log_report(file_path, report)
        return True

    def _extract_file(
        self, archive_path: Path, destination: str | Path, show_progress: bool
    ) -> ExtractionReport:
        with archive_path.open("rb") as handle:
            if not show_progress:
                return self.extract(handle, destination)

            progress = SimpleProgressBar(archive_path.stat().st_size)
            report = self.extract(
                ProgressReader(handle, progress), destination
            )
            progress.finish()
            return report

    def _log_report(
        self, file_path: str | Path, report: ExtractionReport
    ) -> None:
        self.logger.info(
            "Successfully extracted %s to %s (%d files, %d directories, %s)",
            file_path,
            report.destination,
            report.files,
            report.directories,
            format_size(report.bytes_written),
        )
        for attempt in report.failed_restores:
            self.logger.warning(
                "Could not restore %s on %s: %s",
                attempt.operation,
                attempt.path,
                attempt.error,
            )

    def _extract_entry(
        self,
        archive: tarfile.TarFile,
        member: tarfile.TarInfo,
        root: Path,
        report: ExtractionReport,
    ) -> None:
        output = resolve_output_path(root, member.name)
        self._ensure_directory(output.parent)

        if member.isdir():
            self._ensure_directory(output)
            report.directories += 1
            self.logger.debug("Created directory %s", output)
            return

        out_file = self._create_file(output)
        try:
            written = self._copy_content(archive, member, out_file, output)
        except BaseException:
            # The copy error is the one reported.
            with suppress(OSError):
                out_file.close()
            raise
        self._close_file(out_file, output)

        report.files += 1
        report.bytes_written += written
        report.restore_attempts.extend(
            restore_metadata(output, member.mode, member.mtime)
        )
        self.logger.debug("Extracted %s (%d bytes)", output, written)

    def _ensure_directory(self, path: Path) -> None:
        try:
            path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            raise DirectoryCreateError(path=path, cause=exc) from exc

    def _create_file(self, output: Path) -> IO[bytes]:
        """Create or truncate ``output``, retrying once after a delay."""
        error: OSError | None = None
        for attempt in range(1, CREATE_ATTEMPTS + 1):
            try:
                return output.open("wb")
            except OSError as exc:
                error = exc
                if attempt < CREATE_ATTEMPTS:
                    self.logger.debug(
                        "Could not create %s, retrying in %.0fs",
                        output,
                        CREATE_RETRY_DELAY,
                    )
                    time.sleep(CREATE_RETRY_DELAY)
        raise FileCreateError(path=output, cause=error) from error

    def _copy_content(
        self,
        archive: tarfile.TarFile,
        member: tarfile.TarInfo,
        out_file: IO[bytes],
        output: Path,
    ) -> int:
        """Copy the entry's data into ``out_file``.

        Non-regular entries (links, devices, FIFOs) carry no readable data
        and leave the file empty.

        Returns:
            int: Number of bytes written.
        """
        if not member.isreg():
            return 0

        try:
            data = archive.extractfile(member)
        except READ_ERRORS as exc:
            raise TarParseError(path=output, cause=exc) from exc
        if data is None:
            return 0

        written = 0
        while True:
            try:
                chunk = data.read(COPY_BUFSIZE)
            except READ_ERRORS as exc:
                raise TarParseError(path=output, cause=exc) from exc
            if not chunk:
                break
            try:
                out_file.write(chunk)
            except OSError as exc:
                raise FileWriteError(path=output, cause=exc) from exc
            written += len(chunk)
        return written

    def _close_file(self, out_file: IO[bytes], output: Path) -> None:
        try:
            out_file.close()
        except OSError as exc:
            raise FileCloseError(path=output, cause=exc) from exc


def extract(
    stream: IO[bytes] | BinaryIO, destination: str | Path
) -> ExtractionReport:
    """Extract ``stream`` into ``destination`` with a default manager."""
    return ExtractManager().extract(stream, destination)
