"""Shared pytest fixtures for tarstream tests.

This module contains common fixtures used across multiple test modules,
mainly builders for in-memory tar and tar.gz archives.
"""

import gzip
import io
import os
import sys
import tarfile
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

import pytest

# Add the parent directory to sys.path so Python can find the package
sys.path.insert(
    0, os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
)

from tarstream.config import ExtractConfig

FIXED_MTIME = 1_600_000_000


@dataclass
class Entry:
    """Description of one archive member for the archive builders.

    ``content`` of None makes a directory entry.
    """

    name: str
    content: bytes | None = None
    mode: int = 0o644
    mtime: int = FIXED_MTIME
    type: bytes | None = None
    linkname: str = ""


def build_tar(
    entries: Sequence[Entry], tar_format: int = tarfile.USTAR_FORMAT
) -> bytes:
    """Return the bytes of a tar archive (ustar by default) of ``entries``."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w", format=tar_format) as tar:
        for entry in entries:
            info = tarfile.TarInfo(entry.name)
            info.mode = entry.mode
            info.mtime = entry.mtime
            if entry.type is not None:
                info.type = entry.type
                info.linkname = entry.linkname
                tar.addfile(info)
            elif entry.content is None:
                info.type = tarfile.DIRTYPE
                tar.addfile(info)
            else:
                info.size = len(entry.content)
                tar.addfile(info, io.BytesIO(entry.content))
    return buffer.getvalue()


def snapshot_tree(root: Path) -> dict[str, bytes | None]:
    """Map every path under ``root`` to its content (None for directories)."""
    tree: dict[str, bytes | None] = {}
    for path in sorted(root.rglob("*")):
        relative = path.relative_to(root).as_posix()
        tree[relative] = None if path.is_dir() else path.read_bytes()
    return tree


@pytest.fixture
def tar_bytes() -> Callable[..., bytes]:
    """Return a builder producing raw tar bytes from entries."""

    def _build(*entries: Entry) -> bytes:
        return build_tar(entries)

    return _build


@pytest.fixture
def gnu_tar_bytes() -> Callable[..., bytes]:
    """Return a builder producing GNU-format tar bytes from entries.

    GNU headers store out-of-range numbers in base-256, so entries may
    carry values a ustar header cannot hold.
    """

    def _build(*entries: Entry) -> bytes:
        return build_tar(entries, tar_format=tarfile.GNU_FORMAT)

    return _build


@pytest.fixture
def tar_gz_bytes() -> Callable[..., bytes]:
    """Return a builder producing gzip-wrapped tar bytes from entries."""

    def _build(*entries: Entry) -> bytes:
        return gzip.compress(build_tar(entries))

    return _build


@pytest.fixture
def sample_entries() -> list[Entry]:
    """A small tree with nested directories and files."""
    return [
        Entry("docs/"),
        Entry("docs/readme.txt", b"read me\n"),
        Entry("docs/guide/intro.md", b"# Intro\n", mode=0o600),
        Entry("bin/run.sh", b"#!/bin/sh\necho hi\n", mode=0o755),
        Entry("empty.dat", b""),
    ]


@pytest.fixture
def destination(tmp_path: Path) -> Path:
    """Destination root that does not exist yet."""
    return tmp_path / "out"


@pytest.fixture
def test_config(tmp_path: Path) -> ExtractConfig:
    """Create a test configuration kept inside the temporary directory."""
    return ExtractConfig(config_dir=str(tmp_path / "config"))


@pytest.fixture
def entry() -> type[Entry]:
    """Return the archive member description class."""
    return Entry


@pytest.fixture
def snapshot() -> Callable[[Path], dict[str, bytes | None]]:
    """Return the destination tree snapshot helper."""
    return snapshot_tree
