"""Public SDK surface for the prebuild pipeline.

This module provides a stable import path for build scripts and
page-rendering code. It re-exports the runner, config, and cache.
"""

from __future__ import annotations

from core.config import SiteConfig
from core.env_file import load_env_file
from core.types import DatasetOutcome, DatasetSpec, PrebuildResult, SitemapEntry
from ingest.columnar_decoder import decode_parquet_bytes, try_structural_parse
from ingest.pipeline import run_prebuild
from serve.sitemap_generator import generate_sitemap
from serve.snapshot_cache import SnapshotCache, default_snapshot_cache

__all__ = [
    "DatasetOutcome",
    "DatasetSpec",
    "PrebuildResult",
    "SiteConfig",
    "SitemapEntry",
    "SnapshotCache",
    "decode_parquet_bytes",
    "default_snapshot_cache",
    "generate_sitemap",
    "load_env_file",
    "run_prebuild",
    "try_structural_parse",
]
