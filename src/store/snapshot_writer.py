"""JSON snapshot persistence helpers.

This module serializes decoded dataset records to the local cache
directory and reads them back for derived build steps.
"""

from __future__ import annotations

import base64
import json
import numbers
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable

from core.errors import SnapshotReadError, SnapshotWriteError
from core.types import DatasetSpec, Record


def write_snapshot(cache_dir: Path, spec: DatasetSpec, records: Iterable[Record]) -> Path:
    """Overwrite a dataset snapshot with the given records.

    Args:
        cache_dir: Snapshot cache directory, created when absent.
        spec: Dataset being written.
        records: Records to serialize as one JSON array.

    Returns:
        Path of the written snapshot file.

    Raises:
        SnapshotWriteError: If serialization or file write fails.
    """
    snapshot_path = cache_dir / spec.output_file
    try:
        payload = json.dumps(
            list(records), ensure_ascii=False, allow_nan=False, default=_json_default
        )
    except (TypeError, ValueError) as error:
        raise SnapshotWriteError(
            f"Failed to serialize {spec.name} snapshot: {error}. "
            "Check the upstream column types for unsupported values."
        ) from error
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
        snapshot_path.write_text(payload, encoding="utf-8")
    except OSError as error:
        raise SnapshotWriteError(
            f"Failed to persist snapshot at {snapshot_path}: {error}. "
            "Check write permissions and available disk space."
        ) from error
    return snapshot_path


def read_snapshot(snapshot_path: Path) -> list[Record]:
    """Load a snapshot file, treating a missing file as empty.

    Args:
        snapshot_path: JSON snapshot path.

    Returns:
        Parsed records in persisted order.

    Raises:
        SnapshotReadError: If the file is not a JSON array.
    """
    if not snapshot_path.exists():
        return []
    try:
        payload = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise SnapshotReadError(
            f"Failed to parse snapshot at {snapshot_path}: {error.msg}. "
            "Rerun prebuild to regenerate the snapshot."
        ) from error
    if not isinstance(payload, list):
        raise SnapshotReadError(
            f"Failed to parse snapshot at {snapshot_path}: "
            "expected a JSON array at top level. Rerun prebuild."
        )
    return payload


def _json_default(value: Any) -> Any:
    """Serialize values the json module does not handle natively."""
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, Decimal) and value.is_finite():
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
