"""Parquet buffer decoding into row-oriented records.

This module turns a column-oriented Parquet table into a list of
row dictionaries, normalizing wide integers and re-parsing string
cells that hold encoded JSON arrays or objects.
"""

from __future__ import annotations

import base64
import json
import math
from datetime import time, timedelta
from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq

from core.constants import MAX_SAFE_INTEGER, STRUCTURAL_PREFIXES
from core.errors import DecodeError
from core.logging_config import get_logger
from core.types import Record

_LOGGER = get_logger(__name__)


def decode_parquet_bytes(raw_bytes: bytes) -> list[Record]:
    """Decode a Parquet buffer into row records.

    Args:
        raw_bytes: Complete Parquet file content.

    Returns:
        One dictionary per row, keyed by field name.

    Raises:
        DecodeError: If the buffer is not a readable Parquet table.
    """
    table = _read_table(raw_bytes)
    columns = [
        (field, _materialize_column(table.column(index), field))
        for index, field in enumerate(table.schema)
    ]
    rows: list[Record] = []
    unsafe_counts: dict[str, int] = {}
    for row_index in range(table.num_rows):
        row: Record = {}
        for field, values in columns:
            value = _normalize_cell(values[row_index], field.type)
            if isinstance(value, int) and not isinstance(value, bool) and not is_safe_integer(value):
                unsafe_counts[field.name] = unsafe_counts.get(field.name, 0) + 1
            row[field.name] = value
        rows.append(row)
    for column_name, count in unsafe_counts.items():
        _LOGGER.warning(
            "wide_integer_precision_risk",
            column=column_name,
            value_count=count,
            max_safe_integer=MAX_SAFE_INTEGER,
        )
    return rows


def try_structural_parse(value: Any) -> Any:
    """Re-parse a string that looks like an encoded JSON array or object.

    Args:
        value: Raw cell value.

    Returns:
        Parsed structure on success, otherwise ``value`` unchanged.
    """
    if not isinstance(value, str) or not value.startswith(STRUCTURAL_PREFIXES):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value


def coerce_wide_integer(value: Any) -> int:
    """Convert a native wide integer to a plain Python ``int``."""
    return int(value)


def is_safe_integer(value: int) -> bool:
    """Return whether an integer survives double-precision JSON consumers."""
    return -MAX_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER


def to_json_safe(value: Any) -> Any:
    """Convert a decoded value into a strict-JSON-compatible form.

    Non-finite floats become ``None``, ``bytes`` become base64 text,
    ``time`` values become ISO strings and ``timedelta`` values become
    seconds. Lists, tuples and dicts are converted recursively.

    Args:
        value: Decoded cell value.

    Returns:
        Value that ``json.dumps(..., allow_nan=False)`` accepts.
    """
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, dict):
        return {key: to_json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_safe(item) for item in value]
    return value


def _normalize_cell(value: Any, field_type: pa.DataType) -> Any:
    if value is None:
        return None
    if pa.types.is_integer(field_type):
        return coerce_wide_integer(value)
    return to_json_safe(try_structural_parse(value))


def _materialize_column(column: pa.ChunkedArray, field: pa.Field) -> list[Any]:
    """Convert one column to Python values.

    Nanosecond temporal columns are truncated to microseconds, the
    finest resolution Python datetime values hold.

    Raises:
        DecodeError: If the column data cannot be converted.
    """
    try:
        target_type = _microsecond_type(field.type)
        if target_type is not None:
            column = column.cast(target_type, safe=False)
        return column.to_pylist()
    except (pa.ArrowException, ValueError, OSError) as error:
        raise DecodeError(
            f"Failed to decode Parquet column '{field.name}' ({field.type}): {error}. "
            "Check the upstream export for corrupt or unsupported column data."
        ) from error


def _microsecond_type(field_type: pa.DataType) -> pa.DataType | None:
    if pa.types.is_timestamp(field_type) and field_type.unit == "ns":
        return pa.timestamp("us", tz=field_type.tz)
    if pa.types.is_time64(field_type) and field_type.unit == "ns":
        return pa.time64("us")
    if pa.types.is_duration(field_type) and field_type.unit == "ns":
        return pa.duration("us")
    return None


def _read_table(raw_bytes: bytes) -> pa.Table:
    """Parse Parquet bytes into an Arrow table.

    Args:
        raw_bytes: Complete Parquet file content.

    Returns:
        Arrow table.

    Raises:
        DecodeError: If footer, header, or column data is corrupt.
    """
    try:
        return pq.read_table(pa.BufferReader(raw_bytes))
    except (pa.ArrowException, OSError) as error:
        raise DecodeError(
            f"Failed to decode Parquet buffer ({len(raw_bytes)} bytes): {error}. "
            "Check that the upstream export produced a complete Parquet file."
        ) from error
