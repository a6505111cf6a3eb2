"""Prebuild exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class PrebuildError(Exception):
    """Base exception for all prebuild failures."""


class ConfigurationError(PrebuildError):
    """Raised when required runtime configuration is missing or invalid."""


class RemoteFetchError(PrebuildError):
    """Raised when a dataset object cannot be fetched from storage.

    Attributes:
        url: Requested object URL.
        status_code: HTTP status, or ``None`` for transport failures.
    """

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DecodeError(PrebuildError):
    """Raised when a buffer is not a well-formed Parquet table."""


class SnapshotWriteError(PrebuildError):
    """Raised when a JSON snapshot cannot be persisted."""


class SnapshotReadError(PrebuildError):
    """Raised when a JSON snapshot exists but cannot be parsed."""


class SitemapError(PrebuildError):
    """Raised when the sitemap document cannot be written."""
