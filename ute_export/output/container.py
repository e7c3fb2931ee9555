"""Aligned binary chunk container.

Layout::

    header: (u32 offset, u32 length) per chunk, little-endian
    data:   each chunk's bytes, zero-padded to a multiple of 8

Offsets are measured from the start of the file and lengths are the
unpadded chunk sizes. The chunk count is not stored; it follows from the
first offset, which always equals the header size.
"""

import contextlib
import io
import logging
import os
import struct
import zipfile
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import BinaryIO

from ute_export.errors import ContainerFormatError, ContainerIOError, TooLargeError

logger = logging.getLogger(__name__)

ALIGNMENT = 8
HEADER_ENTRY_SIZE = 2 * 4  # offset + length
MAX_CONTAINER_SIZE = 0xFFFFFFFF


def round_up_to_eight(num: int) -> int:
    """Round up to the next multiple of the chunk alignment."""
    return (num + ALIGNMENT - 1) & ~(ALIGNMENT - 1)


def container_size(chunks: Sequence[bytes]) -> int:
    """Total file size for the given chunks."""
    return len(chunks) * HEADER_ENTRY_SIZE + sum(round_up_to_eight(len(c)) for c in chunks)


def pack_float32(values: Iterable[float]) -> bytes:
    """Encode floats as little-endian f32."""
    values = list(values)
    return struct.pack(f"<{len(values)}f", *values)


def pack_uint32(values: Iterable[int]) -> bytes:
    """Encode integers as little-endian u32."""
    values = list(values)
    return struct.pack(f"<{len(values)}I", *values)


def unpack_float32(data: bytes) -> list[float]:
    """Decode little-endian f32 values."""
    return list(struct.unpack(f"<{len(data) // 4}f", data))


def unpack_uint32(data: bytes) -> list[int]:
    """Decode little-endian u32 values."""
    return list(struct.unpack(f"<{len(data) // 4}I", data))


class ContainerWriter:
    """Writes chunks to a file handle and tracks the offset."""

    def __init__(self, file: BinaryIO) -> None:
        """Initialize writer with file handle."""
        self.file = file
        self.offset = 0

    def write_bytes(self, data: bytes) -> None:
        """Write raw bytes and track offset."""
        self.file.write(data)
        self.offset += len(data)

    def write_uint32(self, value: int) -> None:
        """Write uint32 in little-endian."""
        self.write_bytes(struct.pack("<I", value))

    def write_header(self, chunks: Sequence[bytes]) -> None:
        """Write the offset/length table."""
        cursor = len(chunks) * HEADER_ENTRY_SIZE
        for chunk in chunks:
            self.write_uint32(cursor)
            self.write_uint32(len(chunk))
            cursor += round_up_to_eight(len(chunk))

    def write_chunk(self, chunk: bytes) -> None:
        """Write a chunk followed by its zero padding."""
        self.write_bytes(chunk)
        padding = round_up_to_eight(len(chunk)) - len(chunk)
        if padding:
            self.write_bytes(bytes(padding))

    def write_all(self, chunks: Sequence[bytes]) -> None:
        """Write header and every chunk."""
        start = self.offset
        self.write_header(chunks)
        header_size = len(chunks) * HEADER_ENTRY_SIZE
        if self.offset - start != header_size:
            raise ContainerFormatError(
                f"Wrote {self.offset - start} header bytes, expected {header_size}"
            )
        for chunk in chunks:
            self.write_chunk(chunk)


def _member_name(path: Path) -> str:
    return path.stem if path.suffix == ".zip" else path.name


def write_container(path: str | Path, chunks: Sequence[bytes], compress: bool = False) -> int:
    """
    Write chunks to a container file.

    The file is written to a temporary sibling and renamed over ``path`` once
    complete, so a failed export never leaves a truncated container behind.

    Args:
        path: Destination file
        chunks: Ordered chunk payloads
        compress: Store the container as the only member of a zip archive

    Returns:
        Size of the container in bytes (before compression)
    """
    path = Path(path)
    chunks = [bytes(chunk) for chunk in chunks]

    size = container_size(chunks)
    if size > MAX_CONTAINER_SIZE:
        raise TooLargeError(size, MAX_CONTAINER_SIZE)

    logger.debug(f"Writing {len(chunks)} chunks ({size} bytes) to {path}")

    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if compress:
            buffer = io.BytesIO()
            ContainerWriter(buffer).write_all(chunks)
            with zipfile.ZipFile(tmp_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                archive.writestr(_member_name(path), buffer.getvalue())
        else:
            with open(tmp_path, "wb") as f:
                writer = ContainerWriter(f)
                writer.write_all(chunks)
        os.replace(tmp_path, path)
    except OSError as e:
        with contextlib.suppress(OSError):
            tmp_path.unlink(missing_ok=True)
        raise ContainerIOError(str(path), str(e)) from e

    logger.info(f"Wrote {path}")
    return size


class ContainerReader:
    """Reads chunks back from an in-memory container."""

    def __init__(self, data: bytes) -> None:
        """Initialize reader with container bytes."""
        self.data = data

    def read_uint32(self, offset: int) -> int:
        """Read uint32 in little-endian at offset."""
        if offset + 4 > len(self.data):
            raise ContainerFormatError(f"Expected 4 bytes at {offset}, file has {len(self.data)}")
        result: int = struct.unpack_from("<I", self.data, offset)[0]
        return result

    def read_header(self) -> list[tuple[int, int]]:
        """Read the (offset, length) table."""
        if not self.data:
            return []

        header_size = self.read_uint32(0)
        if header_size == 0 or header_size % HEADER_ENTRY_SIZE != 0:
            raise ContainerFormatError(f"Invalid header size: {header_size}")

        entries = []
        for i in range(header_size // HEADER_ENTRY_SIZE):
            offset = self.read_uint32(i * HEADER_ENTRY_SIZE)
            length = self.read_uint32(i * HEADER_ENTRY_SIZE + 4)
            entries.append((offset, length))
        return entries

    def read_chunks(self) -> list[bytes]:
        """Slice every chunk out of the data region."""
        chunks = []
        for offset, length in self.read_header():
            if offset + length > len(self.data):
                raise ContainerFormatError(
                    f"Chunk at {offset} with length {length} runs past end of file"
                )
            chunks.append(self.data[offset : offset + length])
        return chunks


def load_container_bytes(path: str | Path) -> bytes:
    """Read raw container bytes, unpacking a zipped container."""
    path = Path(path)
    if path.suffix == ".zip":
        try:
            with zipfile.ZipFile(path) as archive:
                names = archive.namelist()
                if len(names) != 1:
                    raise ContainerFormatError(
                        f"Expected one member in {path}, found {len(names)}"
                    )
                return archive.read(names[0])
        except zipfile.BadZipFile as e:
            raise ContainerFormatError(f"Invalid zip container {path}: {e}") from e

    with open(path, "rb") as f:
        return f.read()


def read_container(path: str | Path) -> list[bytes]:
    """Read all chunks from a container file."""
    return ContainerReader(load_container_bytes(path)).read_chunks()


def validate_container(path: str | Path) -> dict[str, int]:
    """Check layout invariants of a container file and return counts."""
    logger.info(f"Validating container {path}")

    data = load_container_bytes(path)
    entries = ContainerReader(data).read_header()

    cursor = len(entries) * HEADER_ENTRY_SIZE
    for i, (offset, length) in enumerate(entries):
        if offset != cursor:
            raise ContainerFormatError(f"Chunk {i} offset {offset}, expected {cursor}")
        if offset % ALIGNMENT != 0:
            raise ContainerFormatError(f"Chunk {i} offset {offset} is not aligned")
        end = offset + round_up_to_eight(length)
        if end > len(data):
            raise ContainerFormatError(f"Chunk {i} runs past end of file")
        if any(data[offset + length : end]):
            raise ContainerFormatError(f"Chunk {i} has non-zero padding")
        cursor = end

    if cursor != len(data):
        raise ContainerFormatError(f"File length {len(data)}, expected {cursor}")

    logger.info(f"{path}: chunks={len(entries)}, bytes={len(data)}")
    return {"chunks": len(entries), "bytes": len(data)}
