"""Core constants used across prebuild modules.

This module centralizes paths, dataset names, and sitemap policy values.
Keeping values here avoids magic literals in pipeline logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_ENV_FILE = Path(".env.local")
DEFAULT_CACHE_DIR = Path(".cache/data")
DEFAULT_SITEMAP_PATH = Path("public/sitemap.xml")
DEFAULT_SITE_URL = "https://plant-light.jp"
DEFAULT_FETCH_TIMEOUT_SECONDS = 30.0

STORAGE_BASE_URL_ENV = "R2_PUBLIC_DOMAIN"
CACHE_DIR_ENV = "PREBUILD_CACHE_DIR"
SITEMAP_PATH_ENV = "PREBUILD_SITEMAP_PATH"
SITE_URL_ENV = "SITE_URL"
FETCH_TIMEOUT_ENV = "PREBUILD_FETCH_TIMEOUT"

PARQUET_PREFIX = "parquet"
PARQUET_SUFFIX = ".parquet"
SNAPSHOT_SUFFIX = ".json"
PRODUCTS_DATASET = "products"
GUIDES_DATASET = "guides"
KNOWLEDGE_DATASET = "knowledge"
DATASET_NAMES = (PRODUCTS_DATASET, GUIDES_DATASET, KNOWLEDGE_DATASET)

# Largest integer a JSON consumer backed by IEEE doubles can represent exactly.
MAX_SAFE_INTEGER = 2**53 - 1
STRUCTURAL_PREFIXES = ("[", "{")

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
SITEMAP_FILE_NAME = "sitemap.xml"
HOME_ROUTE = "/"
PRIVACY_ROUTE = "/privacy"
GUIDE_ROUTE_PREFIX = "/guide/"
KNOWLEDGE_ROUTE_PREFIX = "/knowledge/"
PRODUCT_ROUTE_PREFIX = "/products/"
HOME_PRIORITY = "1.0"
GUIDE_PRIORITY = "0.9"
KNOWLEDGE_PRIORITY = "0.8"
PRODUCT_PRIORITY = "0.6"
PRIVACY_PRIORITY = "0.2"
HOME_CHANGEFREQ = "weekly"
GUIDE_CHANGEFREQ = "monthly"
KNOWLEDGE_CHANGEFREQ = "monthly"
PRODUCT_CHANGEFREQ = "weekly"
PRIVACY_CHANGEFREQ = "yearly"
