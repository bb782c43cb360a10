"""Filesystem helpers for cache and packaged data paths."""
from __future__ import annotations

from pathlib import Path

from platformdirs import user_cache_dir


APP_NAME = "media-cache"
APP_AUTHOR = "media-cache"

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def default_cache_path() -> Path:
    """Return the platform-appropriate location of the persisted snapshot."""

    return Path(user_cache_dir(APP_NAME, APP_AUTHOR)) / "cache.json"


def packaged_data_path(name: str) -> Path:
    """Return the path of a data file shipped inside the package."""

    return DATA_DIR / name
