"""Sitemap generation from dataset snapshots.

This module reads the JSON snapshots back from disk and renders a
sitemap-protocol XML document covering static and dataset routes.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Sequence
from urllib.parse import quote

from core.constants import (
    GUIDE_CHANGEFREQ,
    GUIDE_PRIORITY,
    GUIDE_ROUTE_PREFIX,
    GUIDES_DATASET,
    HOME_CHANGEFREQ,
    HOME_PRIORITY,
    HOME_ROUTE,
    KNOWLEDGE_CHANGEFREQ,
    KNOWLEDGE_DATASET,
    KNOWLEDGE_PRIORITY,
    KNOWLEDGE_ROUTE_PREFIX,
    PRIVACY_CHANGEFREQ,
    PRIVACY_PRIORITY,
    PRIVACY_ROUTE,
    PRODUCT_CHANGEFREQ,
    PRODUCT_PRIORITY,
    PRODUCT_ROUTE_PREFIX,
    PRODUCTS_DATASET,
    SITEMAP_NAMESPACE,
)
from core.errors import SitemapError
from core.logging_config import get_logger
from core.types import DatasetSpec, Record, SitemapEntry
from store.snapshot_writer import read_snapshot

_LOGGER = get_logger(__name__)


def generate_sitemap(
    cache_dir: Path,
    output_path: Path,
    site_url: str,
    run_date: date | None = None,
) -> int:
    """Write the sitemap derived from the cached snapshots.

    Args:
        cache_dir: Directory holding the dataset JSON snapshots.
        output_path: Sitemap destination, overwritten when present.
        site_url: Public site origin.
        run_date: Fallback last-modified date, today (UTC) if omitted.

    Returns:
        Number of URL entries written.

    Raises:
        SnapshotReadError: If a snapshot exists but is malformed.
        SitemapError: If the sitemap cannot be written.
    """
    effective_date = run_date or datetime.now(timezone.utc).date()
    entries = build_sitemap_entries(
        site_url,
        products=_read_dataset(cache_dir, PRODUCTS_DATASET),
        guides=_read_dataset(cache_dir, GUIDES_DATASET),
        knowledge=_read_dataset(cache_dir, KNOWLEDGE_DATASET),
        run_date=effective_date,
    )
    document = render_sitemap(entries)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(document)
    except OSError as error:
        raise SitemapError(
            f"Failed to write sitemap at {output_path}: {error}. "
            "Check write permissions for the public directory."
        ) from error
    return len(entries)


def build_sitemap_entries(
    site_url: str,
    products: Sequence[Record],
    guides: Sequence[Record],
    knowledge: Sequence[Record],
    run_date: date,
) -> list[SitemapEntry]:
    """Build sitemap entries for static routes and every dataset record.

    Args:
        site_url: Public site origin.
        products: Catalog item records keyed by ``id``.
        guides: Guide records keyed by ``slug``.
        knowledge: Knowledge article records keyed by ``slug``.
        run_date: Fallback last-modified date.

    Returns:
        Entries in home, privacy, guides, knowledge, products order.
    """
    origin = site_url.rstrip("/")
    today = run_date.isoformat()
    entries = [
        SitemapEntry(
            loc=f"{origin}{HOME_ROUTE}",
            changefreq=HOME_CHANGEFREQ,
            priority=HOME_PRIORITY,
            lastmod=today,
        ),
        SitemapEntry(
            loc=f"{origin}{PRIVACY_ROUTE}",
            changefreq=PRIVACY_CHANGEFREQ,
            priority=PRIVACY_PRIORITY,
        ),
    ]
    route_classes = (
        (guides, "slug", GUIDE_ROUTE_PREFIX, GUIDE_CHANGEFREQ, GUIDE_PRIORITY),
        (knowledge, "slug", KNOWLEDGE_ROUTE_PREFIX, KNOWLEDGE_CHANGEFREQ, KNOWLEDGE_PRIORITY),
        (products, "id", PRODUCT_ROUTE_PREFIX, PRODUCT_CHANGEFREQ, PRODUCT_PRIORITY),
    )
    seen_locs = {entry.loc for entry in entries}
    for records, identity_field, route_prefix, changefreq, priority in route_classes:
        for record in records:
            identity = record.get(identity_field) if isinstance(record, dict) else None
            if identity is None or identity == "":
                _LOGGER.warning(
                    "sitemap_record_skipped",
                    route_prefix=route_prefix,
                    missing_field=identity_field,
                )
                continue
            loc = f"{origin}{route_prefix}{quote(str(identity), safe='')}"
            if loc in seen_locs:
                _LOGGER.warning("sitemap_duplicate_loc", loc=loc)
                continue
            seen_locs.add(loc)
            entries.append(
                SitemapEntry(
                    loc=loc,
                    changefreq=changefreq,
                    priority=priority,
                    lastmod=lastmod_for(record, today),
                )
            )
    return entries


def lastmod_for(record: Record, fallback: str) -> str:
    """Return the date portion of ``updated_at`` or the fallback date.

    Args:
        record: Dataset record.
        fallback: ``YYYY-MM-DD`` date used when ``updated_at`` is empty.

    Returns:
        Last-modified date string.
    """
    updated_at: Any = record.get("updated_at")
    if updated_at is None:
        return fallback
    text = str(updated_at).strip()
    if not text:
        return fallback
    return text.split(" ", 1)[0].split("T", 1)[0]


def render_sitemap(entries: Iterable[SitemapEntry]) -> bytes:
    """Render sitemap entries as a UTF-8 XML document.

    Args:
        entries: Sitemap entries in output order.

    Returns:
        Encoded XML document with declaration.
    """
    urlset = ET.Element("urlset", {"xmlns": SITEMAP_NAMESPACE})
    for entry in entries:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = entry.loc
        if entry.lastmod:
            ET.SubElement(url, "lastmod").text = entry.lastmod
        ET.SubElement(url, "changefreq").text = entry.changefreq
        ET.SubElement(url, "priority").text = entry.priority
    ET.indent(urlset, space="  ")
    return ET.tostring(urlset, encoding="UTF-8", xml_declaration=True)


def _read_dataset(cache_dir: Path, dataset_name: str) -> list[Record]:
    return read_snapshot(cache_dir / DatasetSpec.named(dataset_name).output_file)
