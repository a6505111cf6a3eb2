"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def site_config(tmp_path: Path):
    """Config pointing at the fake storage root and a temp workspace."""
    from core.config import SiteConfig
    from tests.parquet_fixtures import STORAGE_BASE_URL

    return SiteConfig(
        storage_base_url=STORAGE_BASE_URL,
        cache_dir=tmp_path / ".cache" / "data",
        sitemap_path=tmp_path / "public" / "sitemap.xml",
        site_url="https://plant-light.jp",
        fetch_timeout_seconds=5.0,
    )
