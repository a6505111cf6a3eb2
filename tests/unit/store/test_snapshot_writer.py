"""Unit tests for JSON snapshot persistence."""

from __future__ import annotations

import json
import numbers
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from pathlib import Path

import pytest

from core.errors import SnapshotReadError, SnapshotWriteError
from core.types import DatasetSpec
from store.snapshot_writer import read_snapshot, write_snapshot

_GUIDES = DatasetSpec.named("guides")


class _WideCounter:
    """Integral value that is not a Python int, like a numpy int64."""

    def __init__(self, value: int) -> None:
        self._value = value

    def __int__(self) -> int:
        return self._value


@pytest.fixture
def wide_counter_type() -> type[_WideCounter]:
    """Register the counter as Integral only for tests that need it."""
    numbers.Integral.register(_WideCounter)
    return _WideCounter


def test_write_snapshot_creates_cache_dir(tmp_path: Path) -> None:
    """Writer should create missing parents and write a JSON array."""
    cache_dir = tmp_path / "nested" / "cache"

    snapshot_path = write_snapshot(cache_dir, _GUIDES, [{"slug": "pothos", "title": "ポトス"}])

    assert snapshot_path == cache_dir / "guides.json"
    assert "ポトス" in snapshot_path.read_text(encoding="utf-8")
    assert read_snapshot(snapshot_path) == [{"slug": "pothos", "title": "ポトス"}]


def test_write_snapshot_writes_empty_array(tmp_path: Path) -> None:
    """An empty record sequence should serialize as ``[]``."""
    snapshot_path = write_snapshot(tmp_path, _GUIDES, [])

    assert snapshot_path.read_text(encoding="utf-8") == "[]"


def test_write_snapshot_coerces_leftover_native_values(
    tmp_path: Path, wide_counter_type: type[_WideCounter]
) -> None:
    """Non-int integrals, dates, and decimals should serialize cleanly."""
    record = {
        "views": wide_counter_type(9_007_199_254_740_991),
        "updated": datetime(2026, 3, 1, 10, 0, 0),
        "released": date(2026, 1, 2),
        "price": Decimal("12.50"),
    }

    snapshot_path = write_snapshot(tmp_path, _GUIDES, [record])

    assert json.loads(snapshot_path.read_text(encoding="utf-8")) == [
        {
            "views": 9_007_199_254_740_991,
            "updated": "2026-03-01 10:00:00",
            "released": "2026-01-02",
            "price": 12.5,
        }
    ]


def test_write_snapshot_raises_for_unserializable_values(tmp_path: Path) -> None:
    """Unsupported values should raise SnapshotWriteError."""
    with pytest.raises(SnapshotWriteError):
        write_snapshot(tmp_path, _GUIDES, [{"blob": object()}])


def test_read_snapshot_returns_empty_for_missing_file(tmp_path: Path) -> None:
    """A missing snapshot should read as an empty list."""
    assert read_snapshot(tmp_path / "knowledge.json") == []


@pytest.mark.parametrize("content", ["{not json", '{"rows": []}'])
def test_read_snapshot_raises_for_invalid_payload(tmp_path: Path, content: str) -> None:
    """Malformed JSON or a non-array payload should raise."""
    snapshot_path = tmp_path / "products.json"
    snapshot_path.write_text(content, encoding="utf-8")

    with pytest.raises(SnapshotReadError):
        read_snapshot(snapshot_path)


def test_write_snapshot_serializes_time_duration_and_binary(tmp_path: Path) -> None:
    """Time, timedelta, and bytes values should become JSON scalars."""
    record = {"opens": time(9, 30), "warmup": timedelta(seconds=90), "thumb": b"\x00\x01"}

    snapshot_path = write_snapshot(tmp_path, _GUIDES, [record])

    assert json.loads(snapshot_path.read_text(encoding="utf-8")) == [
        {"opens": "09:30:00", "warmup": 90.0, "thumb": "AAE="}
    ]


@pytest.mark.parametrize("value", [float("nan"), float("inf"), Decimal("NaN")])
def test_write_snapshot_rejects_non_finite_numbers(tmp_path: Path, value: object) -> None:
    """Non-finite numbers would produce invalid JSON and must be refused."""
    with pytest.raises(SnapshotWriteError):
        write_snapshot(tmp_path, _GUIDES, [{"review_average": value}])

    assert not (tmp_path / "guides.json").exists()
