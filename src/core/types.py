"""Shared typed models.

This module defines immutable data models used by ingest, store,
and serving layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.constants import DATASET_NAMES, PARQUET_SUFFIX, SNAPSHOT_SUFFIX

Record = dict[str, Any]


@dataclass(frozen=True)
class DatasetSpec:
    """One fixed logical dataset processed by the pipeline.

    Attributes:
        name: Logical dataset name.
        source_file: Remote Parquet object name.
        output_file: Local JSON snapshot file name.
    """

    name: str
    source_file: str
    output_file: str

    @classmethod
    def named(cls, name: str) -> "DatasetSpec":
        """Build the spec for a dataset from its logical name."""
        return cls(
            name=name,
            source_file=f"{name}{PARQUET_SUFFIX}",
            output_file=f"{name}{SNAPSHOT_SUFFIX}",
        )


DATASET_SPECS: tuple[DatasetSpec, ...] = tuple(DatasetSpec.named(name) for name in DATASET_NAMES)


@dataclass(frozen=True)
class DatasetOutcome:
    """Result of fetching and decoding one dataset.

    Attributes:
        spec: Dataset that was processed.
        records: Decoded records, empty on failure.
        error: Failure message, ``None`` on success.
    """

    spec: DatasetSpec
    records: tuple[Record, ...]
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether fetch and decode both succeeded."""
        return self.error is None


@dataclass(frozen=True)
class SitemapEntry:
    """One ``<url>`` element of the sitemap.

    Attributes:
        loc: Absolute page URL.
        changefreq: Sitemap change-frequency hint.
        priority: Sitemap priority string.
        lastmod: Optional ``YYYY-MM-DD`` last-modified date.
    """

    loc: str
    changefreq: str
    priority: str
    lastmod: str | None = None


@dataclass(frozen=True)
class PrebuildResult:
    """Summary of one prebuild run.

    Attributes:
        outcomes: Per-dataset outcomes in processing order.
        sitemap_path: Written sitemap file.
        sitemap_url_count: Number of URL entries written.
    """

    outcomes: tuple[DatasetOutcome, ...]
    sitemap_path: Path
    sitemap_url_count: int
