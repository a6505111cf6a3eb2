"""Integration tests for the prebuild workflow."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import date

from core.constants import SITEMAP_NAMESPACE
from prebuild import SnapshotCache, run_prebuild
from tests.parquet_fixtures import full_session


def test_prebuild_output_feeds_snapshot_cache_and_sitemap(site_config) -> None:
    """End-to-end flow should decode, persist, serve, and map every record."""
    run_prebuild(site_config, session=full_session(), run_date=date(2026, 10, 19))
    cache = SnapshotCache(site_config.cache_dir)

    guide = cache.guide_by_slug("monstera")
    article = cache.knowledge_by_slug("what-is-ppfd")
    root = ET.parse(site_config.sitemap_path).getroot()
    lastmods = {
        url.findtext(f"{{{SITEMAP_NAMESPACE}}}loc"): url.findtext(f"{{{SITEMAP_NAMESPACE}}}lastmod")
        for url in root
    }

    assert guide["required_specs"]["color_temp"] == "5000K"
    assert [product["id"] for product in cache.recommended_products(guide)] == [101]
    assert [product["id"] for product in cache.related_products(article)] == [101, 102]
    assert lastmods["https://plant-light.jp/products/101"] == "2026-03-01"
    assert lastmods["https://plant-light.jp/products/102"] == "2026-10-19"
    assert lastmods["https://plant-light.jp/knowledge/what-is-ppfd"] == "2026-10-19"
    assert lastmods["https://plant-light.jp/guide/monstera"] == "2026-02-14"
