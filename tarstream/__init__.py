"""tarstream package.

Extracts raw or gzip-compressed tar streams onto a directory tree.
"""

import tomllib
from pathlib import Path

try:
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    with pyproject_path.open("rb") as f:
        data = tomllib.load(f)
    __version__ = data.get("project", {}).get("version", "unknown")
except (OSError, ValueError):
    __version__ = "unknown"

from tarstream.errors import (
    DirectoryCreateError,
    ExtractError,
    FileCloseError,
    FileCreateError,
    FileWriteError,
    FormatDetectionError,
    PathTraversalError,
    TarParseError,
)
from tarstream.extract_manager import (
    ExtractionReport,
    ExtractManager,
    extract,
)

__all__ = [
    "DirectoryCreateError",
    "ExtractError",
    "ExtractManager",
    "ExtractionReport",
    "FileCloseError",
    "FileCreateError",
    "FileWriteError",
    "FormatDetectionError",
    "PathTraversalError",
    "TarParseError",
    "extract",
]
