"""Local env-file loader.

This module applies ``KEY=VALUE`` lines from an optional override file
to the process environment without replacing values already set.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import MutableMapping

from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def load_env_file(
    env_path: Path,
    environ: MutableMapping[str, str] | None = None,
) -> None:
    """Apply an env file to the environment when it exists.

    Blank lines, ``#`` comments, and lines without ``=`` are ignored.
    The first ``=`` splits key from value. Keys that already hold a
    non-empty value keep it.

    Args:
        env_path: Path to the optional env file.
        environ: Target mapping, ``os.environ`` when omitted.
    """
    target = os.environ if environ is None else environ
    if not env_path.is_file():
        _LOGGER.debug("env_file_absent", env_path=str(env_path))
        return
    applied_keys: list[str] = []
    for key, value in _parse_env_lines(env_path.read_text(encoding="utf-8")):
        if target.get(key):
            continue
        target[key] = value
        applied_keys.append(key)
    _LOGGER.debug("env_file_loaded", env_path=str(env_path), applied_keys=applied_keys)


def _parse_env_lines(content: str) -> list[tuple[str, str]]:
    """Parse env-file text into key/value pairs.

    Args:
        content: Raw file content.

    Returns:
        Ordered pairs with non-empty keys and values.
    """
    pairs: list[tuple[str, str]] = []
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        key, value = key.strip(), value.strip()
        if key and value:
            pairs.append((key, value))
    return pairs
