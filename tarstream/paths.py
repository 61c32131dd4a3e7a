"""Output path resolution for archive entries.

Entry names are treated as absolute from the archive root, canonicalized,
and only then joined onto the destination. Parent-directory segments are
resolved against the archive root, so ``../../etc/passwd`` lands at
``<destination>/etc/passwd`` rather than outside it.
"""

from __future__ import annotations

import posixpath
import re
from pathlib import Path

from tarstream.errors import PathTraversalError

_SLASH_RUN = re.compile(r"/{2,}")


def normalize_entry_path(name: str) -> str:
    """Return the archive-relative path for an entry name.

    Args:
        name: Path as stored in the tar header.

    Returns:
        str: Slash-separated relative path without ``.`` or ``..`` segments.
        An entry naming the archive root itself yields ``""``.
    """
    rooted = "/" + name.replace("\\", "/")
    rooted = _SLASH_RUN.sub("/", rooted)
    rooted = posixpath.normpath(rooted)
    return rooted.lstrip("/")


def _is_within(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


def resolve_output_path(destination: str | Path, name: str) -> Path:
    """Map an entry name onto a path under ``destination``.

    Args:
        destination: Root of the destination tree.
        name: Path as stored in the tar header.

    Returns:
        Path: Output path for the entry.

    Raises:
        PathTraversalError: If the path leaves the destination once
            existing symbolic links are followed.
    """
    root = Path(destination)
    relative = normalize_entry_path(name)
    output = root.joinpath(*relative.split("/")) if relative else root

    resolved_root = root.resolve()
    if not _is_within(output.resolve(), resolved_root):
        raise PathTraversalError(path=output)
    return output
