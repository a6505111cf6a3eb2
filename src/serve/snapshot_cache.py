"""Memoized snapshot access for page rendering.

This module loads each dataset JSON snapshot at most once per cache
instance and answers the lookups page components need. The snapshots
are treated as read-only for the life of the process.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from core.constants import (
    CACHE_DIR_ENV,
    DEFAULT_CACHE_DIR,
    GUIDES_DATASET,
    KNOWLEDGE_DATASET,
    PRODUCTS_DATASET,
)
from core.logging_config import get_logger
from core.types import DatasetSpec, Record
from store.snapshot_writer import read_snapshot

_LOGGER = get_logger(__name__)
_DEFAULT_CACHE: "SnapshotCache | None" = None


class SnapshotCache:
    """Lazy, per-dataset memoized reader over the snapshot directory."""

    def __init__(self, cache_dir: Path) -> None:
        """Create a cache over a snapshot directory.

        Args:
            cache_dir: Directory written by the prebuild pipeline.
        """
        self._cache_dir = cache_dir
        self._loaded: dict[str, list[Record]] = {}

    def products(self) -> list[Record]:
        """Return every catalog item record."""
        return self._load(PRODUCTS_DATASET)

    def enriched_products(self) -> list[Record]:
        """Return catalog items that carry AI-derived annotations."""
        return [product for product in self.products() if product.get("is_enriched") == 1]

    def product_by_id(self, product_id: int) -> Record | None:
        """Return the catalog item with ``id`` equal to ``product_id``."""
        return next(
            (product for product in self.products() if product.get("id") == product_id),
            None,
        )

    def products_by_category(self, category: str) -> list[Record]:
        """Return enriched products listing ``category`` in ``categories``."""
        return [
            product
            for product in self.enriched_products()
            if category in _as_list(product.get("categories"))
        ]

    def products_by_tag(self, tag: str) -> list[Record]:
        """Return enriched products listing ``tag`` in ``use_tags``."""
        return [
            product
            for product in self.enriched_products()
            if tag in _as_list(product.get("use_tags"))
        ]

    def products_by_brand(self, brand: str) -> list[Record]:
        """Return enriched products whose brand matches case-insensitively."""
        wanted = brand.lower()
        return [
            product
            for product in self.enriched_products()
            if isinstance(product.get("brand"), str) and product["brand"].lower() == wanted
        ]

    def products_by_form_factor(self, form_factor: str) -> list[Record]:
        """Return enriched products with an exact ``form_factor`` match."""
        return [
            product
            for product in self.enriched_products()
            if product.get("form_factor") == form_factor
        ]

    def guides(self) -> list[Record]:
        """Return every care guide record."""
        return self._load(GUIDES_DATASET)

    def guide_by_slug(self, slug: str) -> Record | None:
        """Return the guide with the given slug."""
        return next((guide for guide in self.guides() if guide.get("slug") == slug), None)

    def recommended_products(self, guide: Record) -> list[Record]:
        """Resolve a guide's recommended product references.

        Dangling references are dropped.

        Args:
            guide: Guide record.

        Returns:
            Referenced catalog items in recommendation order.
        """
        product_ids = [
            item.get("product_id")
            for item in _as_list(guide.get("recommended_products"))
            if isinstance(item, dict)
        ]
        return self._resolve_products(product_ids)

    def knowledge_articles(self) -> list[Record]:
        """Return every knowledge article record."""
        return self._load(KNOWLEDGE_DATASET)

    def knowledge_by_slug(self, slug: str) -> Record | None:
        """Return the knowledge article with the given slug."""
        return next(
            (article for article in self.knowledge_articles() if article.get("slug") == slug),
            None,
        )

    def related_products(self, article: Record) -> list[Record]:
        """Resolve a knowledge article's related product ids."""
        return self._resolve_products(_as_list(article.get("related_products")))

    def clear(self) -> None:
        """Drop all memoized datasets so the next access rereads disk."""
        self._loaded.clear()

    def _resolve_products(self, product_ids: list[Any]) -> list[Record]:
        by_id = {product.get("id"): product for product in self.products()}
        return [by_id[product_id] for product_id in product_ids if product_id in by_id]

    def _load(self, dataset_name: str) -> list[Record]:
        if dataset_name in self._loaded:
            return self._loaded[dataset_name]
        snapshot_path = self._cache_dir / DatasetSpec.named(dataset_name).output_file
        if not snapshot_path.exists():
            _LOGGER.warning("snapshot_missing", snapshot_path=str(snapshot_path))
        records = read_snapshot(snapshot_path)
        _LOGGER.info("snapshot_loaded", dataset_name=dataset_name, row_count=len(records))
        self._loaded[dataset_name] = records
        return records


def default_snapshot_cache() -> SnapshotCache:
    """Return the process-wide snapshot cache.

    Returns:
        Shared cache rooted at ``PREBUILD_CACHE_DIR`` or the default.
    """
    global _DEFAULT_CACHE
    if _DEFAULT_CACHE is None:
        cache_dir = Path(os.getenv(CACHE_DIR_ENV) or str(DEFAULT_CACHE_DIR)).expanduser()
        _DEFAULT_CACHE = SnapshotCache(cache_dir)
    return _DEFAULT_CACHE


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []
