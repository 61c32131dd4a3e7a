"""Best-effort restoration of file metadata from archive entries.

Permission bits and modification times are restored after a file's content
is on disk. Restricted environments often refuse these calls, so every
attempt is recorded as a ``RestoreAttempt`` and its failure is kept there
instead of being raised.
"""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

MODE_MASK = 0o7777

# Header values the platform cannot represent (e.g. a GNU base-256 mtime
# beyond time_t) fail with OverflowError or ValueError instead of OSError.
RESTORE_ERRORS: tuple[type[Exception], ...] = (
    OSError,
    OverflowError,
    ValueError,
)


@dataclass(frozen=True)
class RestoreAttempt:
    """Outcome of a single metadata restore call.

    Attributes:
        operation: Name of the operation (``"chmod"`` or ``"utime"``).
        path: File the operation was applied to.
        error: The error raised by the call, or None on success.
    """

    operation: str
    path: Path
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


def attempt_restore(
    operation: str, path: Path, func: Callable[..., Any], *args: Any
) -> RestoreAttempt:
    """Call ``func(path, *args)`` and capture any restore error it raises."""
    try:
        func(path, *args)
    except RESTORE_ERRORS as exc:
        return RestoreAttempt(operation, path, exc)
    return RestoreAttempt(operation, path)


def restore_metadata(
    path: Path, mode: int, mtime: float
) -> list[RestoreAttempt]:
    """Restore permission bits and modification time on ``path``.

    The access time is set to now, as tar headers do not carry one.

    Args:
        path: Extracted file.
        mode: Mode recorded in the tar header.
        mtime: Modification time recorded in the tar header (epoch seconds).

    Returns:
        list[RestoreAttempt]: One attempt per operation, in call order.
    """
    return [
        attempt_restore("chmod", path, os.chmod, mode & MODE_MASK),
        attempt_restore("utime", path, os.utime, (time.time(), mtime)),
    ]
