"""Runtime configuration model for the prebuild pipeline.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping

from core.constants import (
    CACHE_DIR_ENV,
    DEFAULT_CACHE_DIR,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_SITE_URL,
    DEFAULT_SITEMAP_PATH,
    FETCH_TIMEOUT_ENV,
    SITE_URL_ENV,
    SITEMAP_PATH_ENV,
    STORAGE_BASE_URL_ENV,
)
from core.errors import ConfigurationError


@dataclass(frozen=True)
class SiteConfig:
    """Validated runtime configuration.

    Attributes:
        storage_base_url: Public object-store root serving Parquet files.
        cache_dir: Local directory receiving JSON snapshots.
        sitemap_path: Output path of the generated sitemap.
        site_url: Public site origin used for sitemap locations.
        fetch_timeout_seconds: Per-request HTTP timeout.
    """

    storage_base_url: str
    cache_dir: Path
    sitemap_path: Path
    site_url: str
    fetch_timeout_seconds: float

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SiteConfig":
        """Build config from process environment variables.

        Args:
            environ: Optional mapping used instead of ``os.environ``.

        Returns:
            A validated config object.

        Raises:
            ConfigurationError: If the storage endpoint is missing or
                other values are invalid.
        """
        env = os.environ if environ is None else environ
        storage_base_url = _require_storage_base_url(env.get(STORAGE_BASE_URL_ENV))
        cache_dir_value = env.get(CACHE_DIR_ENV) or str(DEFAULT_CACHE_DIR)
        sitemap_path_value = env.get(SITEMAP_PATH_ENV) or str(DEFAULT_SITEMAP_PATH)
        site_url = (env.get(SITE_URL_ENV) or DEFAULT_SITE_URL).strip().rstrip("/")
        timeout_value = env.get(FETCH_TIMEOUT_ENV)
        return cls(
            storage_base_url=storage_base_url,
            cache_dir=Path(cache_dir_value).expanduser(),
            sitemap_path=Path(sitemap_path_value).expanduser(),
            site_url=site_url,
            fetch_timeout_seconds=_parse_fetch_timeout(timeout_value),
        )


def _require_storage_base_url(raw_value: str | None) -> str:
    """Validate the storage endpoint value.

    Args:
        raw_value: Raw string from environment, possibly absent.

    Returns:
        Endpoint URL without a trailing slash.

    Raises:
        ConfigurationError: If the value is missing or blank.
    """
    value = (raw_value or "").strip().rstrip("/")
    if not value:
        raise ConfigurationError(
            f"{STORAGE_BASE_URL_ENV} environment variable is required. "
            f"Set it in the environment or in .env.local before running prebuild."
        )
    return value


def _parse_fetch_timeout(raw_value: str | None) -> float:
    """Parse the fetch timeout environment value.

    Args:
        raw_value: Raw string from environment, possibly absent.

    Returns:
        Positive timeout in seconds.

    Raises:
        ConfigurationError: If value is not a positive number.
    """
    if not raw_value:
        return DEFAULT_FETCH_TIMEOUT_SECONDS
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise ConfigurationError(
            f"Invalid {FETCH_TIMEOUT_ENV} value: "
            f"expected number of seconds, got '{raw_value}'. "
            f"Set {FETCH_TIMEOUT_ENV} to a positive number."
        ) from error
    if timeout <= 0:
        raise ConfigurationError(
            f"Invalid {FETCH_TIMEOUT_ENV} value: expected a positive number, got '{raw_value}'."
        )
    return timeout
