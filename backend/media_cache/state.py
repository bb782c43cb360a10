"""Wiring of settings, HTTP client, sources and store for one process."""
from __future__ import annotations

from dataclasses import dataclass

import httpx

from .overrides import load_override_table
from .settings import CacheSettings
from .sources import SpotifySnapshotSource, TimelessTodaySource, YouTubeSource
from .sources.http import create_client
from .store import CacheStore


@dataclass(slots=True)
class AppState:
    """Owns the resources needed to refresh and query the cache."""

    settings: CacheSettings
    client: httpx.Client
    store: CacheStore

    def __init__(self, settings: CacheSettings, *, transport: httpx.BaseTransport | None = None) -> None:
        self.settings = settings
        self.client = create_client(timeout=settings.http_timeout, transport=transport)
        self.store = CacheStore(
            settings.cache_path,
            catalog=TimelessTodaySource(self.client, settings.catalog_locales),
            streaming=YouTubeSource(self.client, settings.youtube_api_key, settings.youtube_handles),
            snapshot=SpotifySnapshotSource(settings.snapshot_path, settings.snapshot_reference_date),
            overrides=load_override_table(settings.overrides_path),
            stale_after=settings.stale_after,
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> AppState:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
