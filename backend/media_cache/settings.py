"""Runtime configuration for the media cache."""
from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils.paths import default_cache_path, packaged_data_path


class CacheSettings(BaseSettings):
    """Environment-aware settings for refreshing and reading the cache."""

    cache_path: Path = Field(
        default_factory=default_cache_path,
        description="Location of the persisted cache snapshot.",
    )
    stale_after: timedelta = Field(
        default=timedelta(hours=24),
        description="Age after which a persisted snapshot must be refreshed before use.",
    )
    http_timeout: float = Field(
        default=10.0, gt=0, description="Timeout in seconds applied to every upstream call."
    )
    youtube_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("MEDIA_CACHE_YOUTUBE_API_KEY", "YOUTUBE_API_KEY"),
        description="YouTube Data API key used by the streaming source.",
    )
    youtube_handles: list[str] = Field(
        default_factory=lambda: [
            "@wopgyt",
            "@PremRawatOfficial",
            "@rajvidyakender",
            "@TimelessToday",
        ],
        description="Channel handles whose uploads are collected.",
    )
    catalog_locales: list[str] = Field(
        default_factory=lambda: ["hi-IN", "en-US"],
        description="Locales requested from the catalog API.",
    )
    snapshot_path: Path = Field(
        default_factory=lambda: packaged_data_path("spotify.html"),
        description="Static episode listing document.",
    )
    snapshot_reference_date: date = Field(
        default=date(2026, 1, 27),
        description="Date the static listing was captured; anchors relative dates.",
    )
    overrides_path: Path = Field(
        default_factory=lambda: packaged_data_path("overrides.json"),
        description="JSON table of manual corrections applied after every refresh.",
    )

    model_config = SettingsConfigDict(
        env_prefix="MEDIA_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )
