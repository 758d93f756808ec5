"""
In-memory Parquet serialization of trajectory frames.

Used to compare the payload size of the absolute and delta-encoded
representations. Nothing here touches the filesystem.
"""

import io
import logging

import polars as pl

DEFAULT_COMPRESSION = "zstd"
COMPRESSIONS = ("uncompressed", "snappy", "gzip", "lz4", "zstd", "brotli")


def serialize(frame: pl.DataFrame, compression: str = DEFAULT_COMPRESSION) -> bytes:
    """Encode a frame as Parquet bytes."""
    if compression not in COMPRESSIONS:
        raise ValueError(f"Unknown compression {compression!r}, expected one of {COMPRESSIONS}")
    buffer = io.BytesIO()
    frame.write_parquet(buffer, compression=compression)
    data = buffer.getvalue()
    logging.debug(f"[SERIALIZE] {frame.height} rows -> {len(data)} bytes ({compression})")
    return data


def deserialize(data: bytes) -> pl.DataFrame:
    return pl.read_parquet(io.BytesIO(data))


def serialized_size(frame: pl.DataFrame, compression: str = DEFAULT_COMPRESSION) -> int:
    return len(serialize(frame, compression))
