"""Exception hierarchy for tarstream.

Every fatal extraction condition is raised as a subclass of ``ExtractError``
so callers can catch the whole error surface with a single ``except``
clause. Each error carries the offending path (when one is known) and the
underlying cause.
"""

from __future__ import annotations

from pathlib import Path


class ExtractError(Exception):
    """Base exception for all extraction failures.

    Attributes:
        path: Output path the failure relates to, if any.
        cause: Underlying exception that triggered the failure, if any.
    """

    default_message = "extraction failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        path: str | Path | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.path: Path | None = Path(path) if path is not None else None
        self.cause: BaseException | None = cause
        super().__init__(self._build_message(message))

    def _build_message(self, message: str | None) -> str:
        text = message or self.default_message
        if self.path is not None:
            text = f"{text} {self.path}"
        if self.cause is not None:
            text = f"{text}: {self.cause}"
        return text


class FormatDetectionError(ExtractError):
    """Stream too short to sniff, or a gzip stream with a corrupt header."""

    default_message = "format detection"


class TarParseError(ExtractError):
    """Malformed or truncated tar structure encountered mid-stream."""

    default_message = "tar reader next"


class PathTraversalError(ExtractError):
    """An entry resolved to a location outside the destination root."""

    default_message = "path escapes destination"


class DirectoryCreateError(ExtractError):
    """Recursive directory creation failed."""

    default_message = "mkdir"


class FileCreateError(ExtractError):
    """File creation failed even after the delayed retry."""

    default_message = "create"


class FileWriteError(ExtractError):
    """Copying entry content into the output file failed."""

    default_message = "io copy tar reader"


class FileCloseError(ExtractError):
    """Closing (flushing) the output file failed."""

    default_message = "out file close"
