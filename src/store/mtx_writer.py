"""MTX container serialization.

This module writes the fixed 24-byte header, the zone index for both
axes, and the row-major float32 matrix. Every field is little-endian
regardless of host byte order. Paths ending in a compressed suffix
are written through a gzip stream.
"""

from __future__ import annotations

from contextlib import contextmanager
import gzip
from pathlib import Path
import struct
import sys
from typing import IO, Iterator, Sequence
import zlib

import numpy as np

from core.config import MtxConfig
from core.constants import (
    COMPRESSED_SUFFIXES,
    MTX_DIMENSIONS,
    MTX_HEADER_FORMAT,
    MTX_MAGIC,
    MTX_TYPE_FLOAT32,
    MTX_VALUE_DTYPE,
    MTX_VERSION,
    MTX_ZONE_DTYPE,
)
from core.errors import MtxFormatError, MtxIngestError, MtxWriteError
from core.logging_config import get_logger
from core.types import MtxContents, MtxHeader

_LOGGER = get_logger(__name__)
_HEADER_STRUCT = struct.Struct(MTX_HEADER_FORMAT)
HEADER_SIZE = _HEADER_STRUCT.size


def build_header(zone_count: int) -> MtxHeader:
    """Build the header for a square matrix over ``zone_count`` zones."""
    return MtxHeader(
        magic=MTX_MAGIC,
        version=MTX_VERSION,
        type_tag=MTX_TYPE_FLOAT32,
        dimensions=MTX_DIMENSIONS,
        origin_count=zone_count,
        destination_count=zone_count,
    )


def pack_header(header: MtxHeader) -> bytes:
    """Encode a header as 24 little-endian bytes."""
    return _HEADER_STRUCT.pack(
        header.magic,
        header.version,
        header.type_tag,
        header.dimensions,
        header.origin_count,
        header.destination_count,
    )


def unpack_header(payload: bytes) -> MtxHeader:
    """Decode the header from the start of a container payload.

    Raises:
        MtxFormatError: If the payload is too short or the magic is wrong.
    """
    if len(payload) < HEADER_SIZE:
        raise MtxFormatError(
            f"MTX payload is {len(payload)} bytes; expected at least {HEADER_SIZE} header bytes."
        )
    header = MtxHeader(*_HEADER_STRUCT.unpack_from(payload))
    if header.magic != MTX_MAGIC:
        raise MtxFormatError(
            f"Invalid MTX magic 0x{header.magic:08X}; expected 0x{MTX_MAGIC:08X}."
        )
    return header


def encode_zones(zones: Sequence[int], host_byteorder: str = sys.byteorder) -> bytes:
    """Encode zone ids as little-endian int32 values.

    Args:
        zones: Ordered zone ids.
        host_byteorder: Byte order of the in-memory buffer, ``"little"`` or ``"big"``.

    Returns:
        ``4 * len(zones)`` bytes.
    """
    native = np.asarray(zones, dtype=np.int32)
    return to_little_endian_bytes(native, MTX_ZONE_DTYPE, host_byteorder)


def encode_matrix(matrix: np.ndarray, host_byteorder: str = sys.byteorder) -> bytes:
    """Encode a matrix as row-major little-endian float32 values.

    Args:
        matrix: Dense matrix.
        host_byteorder: Byte order of the in-memory buffer, ``"little"`` or ``"big"``.

    Returns:
        ``4 * matrix.size`` bytes.
    """
    native = np.ascontiguousarray(matrix, dtype=np.float32)
    return to_little_endian_bytes(native, MTX_VALUE_DTYPE, host_byteorder)


def to_little_endian_bytes(native: np.ndarray, little_dtype: str, host_byteorder: str) -> bytes:
    """Return little-endian bytes for a host-order buffer.

    On little-endian hosts the buffer is emitted as is; otherwise each
    element is converted to ``little_dtype`` first.
    """
    if host_byteorder == "little":
        return native.tobytes()
    return native.astype(little_dtype).tobytes(order="C")


def is_compressed_path(output_path: str | Path) -> bool:
    """Return whether the path selects gzip transport."""
    return str(output_path).endswith(COMPRESSED_SUFFIXES)


@contextmanager
def open_output_stream(output_path: Path, config: MtxConfig) -> Iterator[IO[bytes]]:
    """Open the byte sink for a container.

    Args:
        output_path: Destination path.
        config: Runtime configuration for the compression level.

    Yields:
        A gzip stream for compressed suffixes, else the raw file.
    """
    with output_path.open("wb") as raw_stream:
        if not is_compressed_path(output_path):
            yield raw_stream
            return
        with gzip.GzipFile(
            fileobj=raw_stream,
            mode="wb",
            compresslevel=config.compression_level,
        ) as gzip_stream:
            yield gzip_stream


def write_mtx_file(
    output_path: str | Path,
    zones: Sequence[int],
    matrix: np.ndarray,
    config: MtxConfig,
) -> Path:
    """Write a square matrix and its zone labels as an MTX container.

    Sections are written in order: header, origin zones, destination
    zones, matrix values. Both axes carry the same zone labels.

    Args:
        output_path: Destination path; ``.gz`` selects gzip transport.
        zones: Ordered zone ids.
        matrix: ``(n, n)`` matrix where ``n == len(zones)``.
        config: Runtime configuration.

    Returns:
        Resolved output path.

    Raises:
        MtxWriteError: If the matrix shape does not match the zones, or
            the file cannot be created or written.
    """
    target_path = Path(output_path).expanduser()
    zone_count = len(zones)
    if matrix.shape != (zone_count, zone_count):
        raise MtxWriteError(
            f"Matrix shape {matrix.shape} does not match {zone_count} zones; "
            f"expected ({zone_count}, {zone_count})."
        )
    zone_bytes = encode_zones(zones)
    try:
        with open_output_stream(target_path, config) as stream:
            stream.write(pack_header(build_header(zone_count)))
            stream.write(zone_bytes)
            stream.write(zone_bytes)
            stream.write(encode_matrix(matrix))
    except OSError as error:
        raise MtxWriteError(
            f"Failed to write MTX file at {target_path}: {error}. "
            "Check that the output directory exists and is writable."
        ) from error
    _LOGGER.info(
        "mtx_written",
        output_path=str(target_path),
        zone_count=zone_count,
        compressed=is_compressed_path(target_path),
    )
    return target_path


def read_mtx_file(input_path: str | Path) -> MtxContents:
    """Decode an MTX container written by ``write_mtx_file``.

    Args:
        input_path: Container path; ``.gz`` paths are decompressed.

    Returns:
        Header, zone labels, and matrix.

    Raises:
        MtxIngestError: If the file cannot be opened.
        MtxFormatError: If the content is not a valid container.
    """
    source_path = Path(input_path).expanduser()
    payload = _read_container_bytes(source_path)
    header = unpack_header(payload)
    origin_count = header.origin_count
    destination_count = header.destination_count
    expected_size = HEADER_SIZE + 4 * (
        origin_count + destination_count + origin_count * destination_count
    )
    if origin_count < 0 or destination_count < 0 or len(payload) != expected_size:
        raise MtxFormatError(
            f"MTX file {source_path} is {len(payload)} bytes; expected {expected_size} "
            f"for a {origin_count}x{destination_count} matrix."
        )
    origin_zones = np.frombuffer(
        payload, dtype=MTX_ZONE_DTYPE, count=origin_count, offset=HEADER_SIZE
    )
    destination_offset = HEADER_SIZE + 4 * origin_count
    destination_zones = np.frombuffer(
        payload, dtype=MTX_ZONE_DTYPE, count=destination_count, offset=destination_offset
    )
    matrix_offset = destination_offset + 4 * destination_count
    values = np.frombuffer(
        payload,
        dtype=MTX_VALUE_DTYPE,
        count=origin_count * destination_count,
        offset=matrix_offset,
    )
    return MtxContents(
        header=header,
        origin_zones=tuple(int(zone_id) for zone_id in origin_zones),
        destination_zones=tuple(int(zone_id) for zone_id in destination_zones),
        matrix=values.astype(np.float32).reshape(origin_count, destination_count),
    )


def _read_container_bytes(source_path: Path) -> bytes:
    try:
        if is_compressed_path(source_path):
            with gzip.open(source_path, "rb") as stream:
                return stream.read()
        return source_path.read_bytes()
    except (gzip.BadGzipFile, EOFError, zlib.error) as error:
        raise MtxFormatError(f"MTX file {source_path} is not valid gzip: {error}.") from error
    except OSError as error:
        raise MtxIngestError(
            f"Failed to read MTX file at {source_path}: {error}. "
            "Provide an existing container path."
        ) from error
