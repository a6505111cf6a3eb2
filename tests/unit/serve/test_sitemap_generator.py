"""Unit tests for sitemap generation."""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from datetime import date
from pathlib import Path

from core.constants import SITEMAP_NAMESPACE
from serve.sitemap_generator import (
    build_sitemap_entries,
    generate_sitemap,
    lastmod_for,
    render_sitemap,
)

_SITE = "https://plant-light.jp"
_RUN_DATE = date(2026, 10, 19)
_NS = {"sm": SITEMAP_NAMESPACE}


def _write_cache(cache_dir: Path, **datasets: list[dict[str, object]]) -> None:
    cache_dir.mkdir(parents=True, exist_ok=True)
    for name, records in datasets.items():
        (cache_dir / f"{name}.json").write_text(json.dumps(records), encoding="utf-8")


def _parse_urls(sitemap_path: Path) -> list[dict[str, str]]:
    root = ET.parse(sitemap_path).getroot()
    return [
        {child.tag.split("}", 1)[1]: child.text or "" for child in url}
        for url in root.findall("sm:url", _NS)
    ]


def test_generate_sitemap_counts_every_route(tmp_path: Path) -> None:
    """Sitemap should hold static routes plus one URL per record."""
    cache_dir = tmp_path / "cache"
    _write_cache(
        cache_dir,
        products=[{"id": 1}, {"id": 2}, {"id": 3}],
        guides=[{"slug": "monstera"}, {"slug": "pothos"}],
        knowledge=[{"slug": "what-is-ppfd"}],
    )
    output_path = tmp_path / "public" / "sitemap.xml"

    url_count = generate_sitemap(cache_dir, output_path, _SITE, run_date=_RUN_DATE)

    locs = [url["loc"] for url in _parse_urls(output_path)]
    assert url_count == 2 + 2 + 1 + 3
    assert len(locs) == url_count and len(set(locs)) == url_count
    assert locs[:3] == [f"{_SITE}/", f"{_SITE}/privacy", f"{_SITE}/guide/monstera"]
    assert f"{_SITE}/products/3" in locs


def test_generate_sitemap_treats_missing_snapshots_as_empty(tmp_path: Path) -> None:
    """Missing snapshot files should still yield the static routes."""
    output_path = tmp_path / "sitemap.xml"

    url_count = generate_sitemap(tmp_path / "absent", output_path, _SITE, run_date=_RUN_DATE)

    urls = _parse_urls(output_path)
    assert url_count == 2
    assert urls[0] == {
        "loc": f"{_SITE}/",
        "lastmod": "2026-10-19",
        "changefreq": "weekly",
        "priority": "1.0",
    }
    assert "lastmod" not in urls[1]


def test_generate_sitemap_overwrites_existing_file(tmp_path: Path) -> None:
    """The sitemap should be fully replaced on each run."""
    output_path = tmp_path / "sitemap.xml"
    output_path.write_text("stale", encoding="utf-8")

    generate_sitemap(tmp_path, output_path, _SITE, run_date=_RUN_DATE)

    assert output_path.read_bytes().startswith(b"<?xml")


def test_lastmod_uses_date_portion_or_run_date() -> None:
    """Timestamps should be cut to their date, empty values fall back."""
    assert lastmod_for({"updated_at": "2026-03-01 10:00:00"}, "2026-10-19") == "2026-03-01"
    assert lastmod_for({"updated_at": "2026-03-01T10:00:00Z"}, "2026-10-19") == "2026-03-01"
    assert lastmod_for({"updated_at": None}, "2026-10-19") == "2026-10-19"
    assert lastmod_for({"updated_at": ""}, "2026-10-19") == "2026-10-19"
    assert lastmod_for({}, "2026-10-19") == "2026-10-19"


def test_entry_priorities_are_monotonic_by_importance() -> None:
    """Home outranks guides, knowledge, products, then static pages."""
    entries = build_sitemap_entries(
        _SITE,
        products=[{"id": 1}],
        guides=[{"slug": "g"}],
        knowledge=[{"slug": "k"}],
        run_date=_RUN_DATE,
    )

    home, privacy, guide, knowledge, product = (float(entry.priority) for entry in entries)
    assert home >= guide >= knowledge >= product >= privacy


def test_build_entries_skips_duplicates_and_missing_identity() -> None:
    """Records repeating a loc or lacking identity should be skipped."""
    entries = build_sitemap_entries(
        _SITE,
        products=[{"id": 5}, {"id": 5}, {"name": "no id"}],
        guides=[{"slug": ""}],
        knowledge=[],
        run_date=_RUN_DATE,
    )

    assert [entry.loc for entry in entries] == [
        f"{_SITE}/",
        f"{_SITE}/privacy",
        f"{_SITE}/products/5",
    ]


def test_render_sitemap_escapes_and_encodes_locations() -> None:
    """Slugs should be percent-encoded and the document well formed."""
    entries = build_sitemap_entries(
        _SITE,
        products=[],
        guides=[{"slug": "ガジュマル", "updated_at": "2026-01-05 09:00:00"}],
        knowledge=[{"slug": "a&b"}],
        run_date=_RUN_DATE,
    )

    root = ET.fromstring(render_sitemap(entries))

    locs = [element.text for element in root.iter(f"{{{SITEMAP_NAMESPACE}}}loc")]
    assert locs[2] == f"{_SITE}/guide/%E3%82%AC%E3%82%B8%E3%83%A5%E3%83%9E%E3%83%AB"
    assert locs[3] == f"{_SITE}/knowledge/a%26b"
    assert root.tag == f"{{{SITEMAP_NAMESPACE}}}urlset"


def test_build_entries_skips_records_that_are_not_objects() -> None:
    """Scalar or list rows in a snapshot should be skipped, not crash."""
    entries = build_sitemap_entries(
        _SITE,
        products=["oops", 5, None, {"id": 7}],
        guides=[["monstera"], {"slug": "pothos"}],
        knowledge=[],
        run_date=_RUN_DATE,
    )

    assert [entry.loc for entry in entries] == [
        f"{_SITE}/",
        f"{_SITE}/privacy",
        f"{_SITE}/guide/pothos",
        f"{_SITE}/products/7",
    ]
