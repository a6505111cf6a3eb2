"""Remote object fetcher for Parquet snapshots.

This module downloads dataset objects from the public storage endpoint.
Each dataset is fetched with a single bounded GET and no retries.
"""

from __future__ import annotations

from typing import Any

import requests

from core.config import SiteConfig
from core.constants import PARQUET_PREFIX
from core.errors import RemoteFetchError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def build_object_url(storage_base_url: str, file_name: str) -> str:
    """Join the storage root, Parquet prefix, and object name.

    Args:
        storage_base_url: Public storage root URL.
        file_name: Dataset object name, e.g. ``products.parquet``.

    Returns:
        Absolute object URL.
    """
    return f"{storage_base_url.rstrip('/')}/{PARQUET_PREFIX}/{file_name.lstrip('/')}"


def fetch_dataset_file(
    file_name: str,
    config: SiteConfig,
    session: Any | None = None,
) -> bytes:
    """Download one dataset object.

    Args:
        file_name: Dataset object name.
        config: Runtime configuration with storage root and timeout.
        session: Optional ``requests.Session``-compatible client.

    Returns:
        Full response body.

    Raises:
        RemoteFetchError: On transport failure or non-2xx status.
    """
    url = build_object_url(config.storage_base_url, file_name)
    _LOGGER.info("dataset_fetch_started", url=url)
    client = session if session is not None else requests
    try:
        response = client.get(url, timeout=config.fetch_timeout_seconds)
    except requests.RequestException as error:
        raise RemoteFetchError(
            f"Failed to fetch {url}: {error}. Check network access to the storage endpoint.",
            url=url,
        ) from error
    if not 200 <= response.status_code < 300:
        raise RemoteFetchError(
            f"Failed to fetch {url}: {response.status_code}",
            url=url,
            status_code=response.status_code,
        )
    return response.content
