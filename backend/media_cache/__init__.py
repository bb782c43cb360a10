"""
Locally persisted cache of media metadata merged from several providers.

The cache is rebuilt in full from the TimelessToday catalog, YouTube channel
uploads and a saved Spotify listing, corrected by a manual override table,
and queried through :func:`filter_items`.
"""

from .errors import DecodeError, MediaCacheError, ParseError, PersistenceError, UpstreamError
from .overrides import OverrideTable, apply_overrides, load_override_table
from .query import filter_items
from .schemas import CacheSnapshot, FilterParams, MediaItem
from .settings import CacheSettings
from .state import AppState
from .store import CacheState, CacheStore, MediaCache

__all__ = [
    "AppState",
    "CacheSettings",
    "CacheSnapshot",
    "CacheState",
    "CacheStore",
    "DecodeError",
    "FilterParams",
    "MediaCache",
    "MediaCacheError",
    "MediaItem",
    "OverrideTable",
    "ParseError",
    "PersistenceError",
    "UpstreamError",
    "apply_overrides",
    "filter_items",
    "load_override_table",
]
