"""Prebuild CLI entry point.

This module resolves configuration, runs the prebuild pipeline, and
prints one progress line per dataset.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from core.config import SiteConfig
from core.constants import DEFAULT_ENV_FILE, SITEMAP_FILE_NAME
from core.env_file import load_env_file
from core.errors import ConfigurationError
from core.logging_config import get_logger
from core.types import PrebuildResult
from ingest.pipeline import run_prebuild

_LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="plantlight-prebuild",
        description="Fetch Parquet snapshots into the local JSON cache and write sitemap.xml",
    )
    parser.add_argument(
        "--env-file",
        default=str(DEFAULT_ENV_FILE),
        help="Optional KEY=VALUE file applied before reading the environment",
    )
    parser.add_argument("--cache-dir", help="Override PREBUILD_CACHE_DIR for this run")
    parser.add_argument("--sitemap-path", help="Override PREBUILD_SITEMAP_PATH for this run")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the prebuild CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)
    load_env_file(Path(args.env_file).expanduser())
    try:
        config = _build_config(args.cache_dir, args.sitemap_path)
    except ConfigurationError as error:
        _LOGGER.error("configuration_invalid", error=str(error))
        print(f"ERROR: {error}", file=sys.stderr)
        return 1
    _LOGGER.info("prebuild_started", storage_base_url=config.storage_base_url)
    result = run_prebuild(config)
    _print_summary(result)
    _LOGGER.info("prebuild_completed")
    return 0


def _build_config(cache_dir: str | None, sitemap_path: str | None) -> SiteConfig:
    """Build config with optional path overrides.

    Args:
        cache_dir: Optional snapshot directory override.
        sitemap_path: Optional sitemap output override.

    Returns:
        Validated configuration.

    Raises:
        ConfigurationError: If the storage endpoint is not configured.
    """
    config = SiteConfig.from_env()
    if cache_dir:
        config = replace(config, cache_dir=Path(cache_dir).expanduser())
    if sitemap_path:
        config = replace(config, sitemap_path=Path(sitemap_path).expanduser())
    return config


def _print_summary(result: PrebuildResult) -> None:
    for outcome in result.outcomes:
        spec = outcome.spec
        if outcome.succeeded:
            print(f"  {spec.source_file} -> {spec.output_file} ({len(outcome.records)} rows)")
        else:
            print(f"  {spec.source_file}: {outcome.error}", file=sys.stderr)
    print(f"  {SITEMAP_FILE_NAME} generated ({result.sitemap_url_count} URLs)")
