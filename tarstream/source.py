"""Archive stream sources for the extractor.

The input stream is wrapped in a peek-capable buffer, sniffed for the gzip
magic number, and then decoded either as raw tar or as gzip-wrapped tar.
Tar entries are produced lazily through a streaming ``tarfile`` reader.
"""

from __future__ import annotations

import gzip
import io
import logging
import tarfile
import zlib
from abc import ABC, abstractmethod
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import IO, BinaryIO

from tarstream.errors import FormatDetectionError, TarParseError

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
GZIP_HEADER_SIZE = 10
GZIP_METHOD_DEFLATE = 8

# Header flag bits (RFC 1952)
GZIP_FHCRC = 0x02
GZIP_FEXTRA = 0x04
GZIP_FNAME = 0x08
GZIP_FCOMMENT = 0x10
GZIP_FIELD_CHUNK = 256

# Anything the tar/gzip reading side can raise while fetching entries or
# entry data. A closed input stream surfaces as ValueError.
READ_ERRORS: tuple[type[BaseException], ...] = (
    tarfile.TarError,
    EOFError,
    OSError,
    ValueError,
    zlib.error,
)


class PeekableStream(io.RawIOBase):
    """Read-only wrapper that supports look-ahead without consumption.

    Peeked bytes are kept in an internal buffer and handed out again by
    subsequent reads, so sniffing the format never disturbs the sequential
    view of the stream. The wrapped stream is borrowed: closing the wrapper
    does not close it.
    """

    def __init__(self, stream: IO[bytes]) -> None:
        super().__init__()
        self._stream = stream
        self._buffer = b""

    def readable(self) -> bool:
        return True

    def peek(self, size: int) -> bytes:
        """Return up to ``size`` upcoming bytes without consuming them.

        Fewer bytes are returned only when the stream ends first.
        """
        while len(self._buffer) < size:
            chunk = self._stream.read(size - len(self._buffer))
            if not chunk:
                break
            self._buffer += chunk
        return self._buffer[:size]

    def readinto(self, buffer) -> int:  # type: ignore[no-untyped-def]
        view = memoryview(buffer).cast("B")
        if self._buffer:
            count = min(len(view), len(self._buffer))
            view[:count] = self._buffer[:count]
            self._buffer = self._buffer[count:]
            return count

        data = self._stream.read(len(view))
        if not data:
            return 0
        count = len(data)
        view[:count] = data
        return count


class ArchiveSource(ABC):
    """A decodable byte source producing a plain tar stream."""

    name: str = "archive"

    def __init__(self, stream: PeekableStream) -> None:
        self.stream = stream

    @abstractmethod
    @contextmanager
    def decoded(self) -> Generator[IO[bytes], None, None]:
        """Yield a file object reading the decoded tar bytes."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RawTarSource(ArchiveSource):
    """Uncompressed tar: the stream is read as-is."""

    name = "tar"

    @contextmanager
    def decoded(self) -> Generator[IO[bytes], None, None]:
        yield self.stream


class GzipTarSource(ArchiveSource):
    """Gzip-wrapped tar, decompressed on the fly."""

    name = "tar+gzip"

    def _require(self, size: int) -> bytes:
        data = self.stream.peek(size)
        if len(data) < size:
            raise FormatDetectionError(
                "error decompressing",
                cause=EOFError("truncated gzip header"),
            )
        return data

    def _field_end(self, start: int) -> int:
        """Return the offset just past the zero byte ending a header string."""
        limit = start + GZIP_FIELD_CHUNK
        while True:
            data = self.stream.peek(limit)
            end = data.find(b"\x00", start)
            if end >= 0:
                return end + 1
            if len(data) < limit:
                raise FormatDetectionError(
                    "error decompressing",
                    cause=EOFError("truncated gzip header"),
                )
            limit *= 2

    def _check_header(self) -> None:
        """Validate the whole gzip member header, optional fields included.

        Everything the header flags declare must be present before any
        decompression starts.
        """
        header = self._require(GZIP_HEADER_SIZE)
        if header[2] != GZIP_METHOD_DEFLATE:
            raise FormatDetectionError(
                "error decompressing",
                cause=gzip.BadGzipFile(
                    f"unknown compression method {header[2]}"
                ),
            )

        flags = header[3]
        size = GZIP_HEADER_SIZE
        if flags & GZIP_FEXTRA:
            data = self._require(size + 2)
            size += 2 + int.from_bytes(data[size : size + 2], "little")
            self._require(size)
        if flags & GZIP_FNAME:
            size = self._field_end(size)
        if flags & GZIP_FCOMMENT:
            size = self._field_end(size)
        if flags & GZIP_FHCRC:
            size += 2
            self._require(size)
        logger.debug("Gzip member header is %d bytes", size)

    @contextmanager
    def decoded(self) -> Generator[IO[bytes], None, None]:
        self._check_header()
        with gzip.GzipFile(fileobj=self.stream, mode="rb") as gzip_file:
            yield gzip_file


def detect_source(stream: IO[bytes] | BinaryIO) -> ArchiveSource:
    """Choose the decoding strategy for ``stream`` by sniffing two bytes.

    Args:
        stream: Readable binary stream positioned at the archive start.

    Returns:
        ArchiveSource: ``GzipTarSource`` when the gzip magic number is
        present, ``RawTarSource`` otherwise.

    Raises:
        FormatDetectionError: If fewer than two bytes can be read.
    """
    peekable = (
        stream if isinstance(stream, PeekableStream) else PeekableStream(stream)
    )
    try:
        magic = peekable.peek(len(GZIP_MAGIC))
    except (OSError, ValueError) as exc:
        raise FormatDetectionError(cause=exc) from exc

    if len(magic) < len(GZIP_MAGIC):
        raise FormatDetectionError(
            "stream too short to detect format",
            cause=EOFError(f"got {len(magic)} of {len(GZIP_MAGIC)} bytes"),
        )

    source: ArchiveSource
    if magic == GZIP_MAGIC:
        source = GzipTarSource(peekable)
    else:
        source = RawTarSource(peekable)
    logger.debug("Detected archive format: %s", source.name)
    return source


class StrictTarInfo(tarfile.TarInfo):
    """TarInfo that never lets a broken header pass as end of archive.

    The streaming reader treats a short or checksum-failing header after
    the first entry as the end of the archive. Only a zero block or a
    stream ending exactly on an entry boundary may end it here; anything
    else is re-raised as a ``SubsequentHeaderError``, which ``TarFile``
    always reports as ``ReadError``.
    """

    @classmethod
    def fromtarfile(cls, tarfile_: tarfile.TarFile) -> tarfile.TarInfo:
        try:
            return super().fromtarfile(tarfile_)
        except (
            tarfile.TruncatedHeaderError,
            tarfile.InvalidHeaderError,
        ) as exc:
            raise tarfile.SubsequentHeaderError(str(exc)) from exc


@contextmanager
def open_tar(source: ArchiveSource) -> Generator[tarfile.TarFile, None, None]:
    """Open a forward-only streaming tar reader over ``source``.

    Raises:
        FormatDetectionError: If the gzip header is unusable.
        TarParseError: If the first tar header cannot be read.
    """
    with source.decoded() as decoded:
        try:
            archive = tarfile.open(
                fileobj=decoded, mode="r|", tarinfo=StrictTarInfo
            )
        except READ_ERRORS as exc:
            raise TarParseError(cause=exc) from exc
        with archive:
            yield archive


def iter_entries(archive: tarfile.TarFile) -> Iterator[tarfile.TarInfo]:
    """Yield archive entries lazily, in archive order.

    The sequence ends at the end-of-archive marker or when the stream ends
    exactly between entries.

    Raises:
        TarParseError: If a header cannot be parsed or the stream breaks.
    """
    while True:
        try:
            member = archive.next()
        except READ_ERRORS as exc:
            raise TarParseError(cause=exc) from exc
        if member is None:
            return
        yield member
