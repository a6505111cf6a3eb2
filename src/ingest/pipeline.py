"""Prebuild orchestration.

This module coordinates per-dataset fetch, decode, and snapshot
writes, then derives the sitemap from the written snapshots.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from core.config import SiteConfig
from core.errors import DecodeError, RemoteFetchError, SnapshotWriteError
from core.logging_config import get_logger
from core.types import DATASET_SPECS, DatasetOutcome, DatasetSpec, PrebuildResult
from ingest.columnar_decoder import decode_parquet_bytes
from ingest.remote_fetcher import fetch_dataset_file
from serve.sitemap_generator import generate_sitemap
from store.snapshot_writer import write_snapshot

_LOGGER = get_logger(__name__)


class PrebuildPipelineRunner:
    """Runner for one full-snapshot prebuild pass."""

    def __init__(
        self,
        config: SiteConfig,
        session: Any | None = None,
        run_date: date | None = None,
    ) -> None:
        self._config = config
        self._session = session
        self._run_date = run_date

    def run(self) -> PrebuildResult:
        """Process every dataset, then write the sitemap."""
        outcomes = tuple(self._process_dataset(spec) for spec in DATASET_SPECS)
        url_count = generate_sitemap(
            self._config.cache_dir,
            self._config.sitemap_path,
            self._config.site_url,
            run_date=self._run_date,
        )
        _LOGGER.info(
            "sitemap_generated",
            sitemap_path=str(self._config.sitemap_path),
            url_count=url_count,
        )
        return PrebuildResult(
            outcomes=outcomes,
            sitemap_path=self._config.sitemap_path,
            sitemap_url_count=url_count,
        )

    def _process_dataset(self, spec: DatasetSpec) -> DatasetOutcome:
        outcome = self._load_dataset(spec)
        try:
            snapshot_path = write_snapshot(self._config.cache_dir, spec, outcome.records)
        except SnapshotWriteError as error:
            if not outcome.records:
                raise
            _LOGGER.warning(
                "snapshot_serialization_failed",
                dataset_name=spec.name,
                source_file=spec.source_file,
                error=str(error),
            )
            outcome = DatasetOutcome(spec=spec, records=(), error=str(error))
            snapshot_path = write_snapshot(self._config.cache_dir, spec, outcome.records)
        _LOGGER.info(
            "snapshot_written",
            dataset_name=spec.name,
            source_file=spec.source_file,
            snapshot_path=str(snapshot_path),
            row_count=len(outcome.records),
            fallback=not outcome.succeeded,
        )
        return outcome

    def _load_dataset(self, spec: DatasetSpec) -> DatasetOutcome:
        try:
            raw_bytes = fetch_dataset_file(spec.source_file, self._config, self._session)
            records = decode_parquet_bytes(raw_bytes)
        except (RemoteFetchError, DecodeError) as error:
            _LOGGER.warning(
                "dataset_fetch_failed",
                dataset_name=spec.name,
                source_file=spec.source_file,
                error=str(error),
            )
            return DatasetOutcome(spec=spec, records=(), error=str(error))
        return DatasetOutcome(spec=spec, records=tuple(records))


def run_prebuild(
    config: SiteConfig,
    session: Any | None = None,
    run_date: date | None = None,
) -> PrebuildResult:
    """Run the prebuild pipeline once.

    Dataset fetch and decode failures are isolated: the affected
    snapshot is written as an empty array and the run continues.

    Args:
        config: Runtime configuration.
        session: Optional ``requests.Session``-compatible HTTP client.
        run_date: Fallback sitemap date, today (UTC) if omitted.

    Returns:
        Run summary with per-dataset outcomes.

    Raises:
        SnapshotWriteError: If a snapshot cannot be written.
        SitemapError: If the sitemap cannot be written.
    """
    return PrebuildPipelineRunner(config, session=session, run_date=run_date).run()
