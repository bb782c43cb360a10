"""Pydantic models shared by the cache, its sources and the query engine."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MediaItem(BaseModel):
    """One canonical content record keyed by ``id``."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Globally unique identifier, used as the merge key.")
    title: str = Field(..., description="Display title.")
    description: str = Field(default="", description="Free text description, may be empty.")
    duration: timedelta = Field(
        default=timedelta(0), description="Play length; zero means unknown."
    )
    language: str = Field(default="", description="Normalized locale tag such as en-US.")
    click_url: str = Field(..., description="Absolute URL of the playable resource.")
    publish_year: int = Field(default=0, ge=0, description="Publish year, 0 when unknown.")
    publish_month: int = Field(default=0, ge=0, le=12, description="Publish month, 0 when unknown.")
    publish_day: int = Field(default=0, ge=0, le=31, description="Publish day, 0 when unknown.")
    thumbnail_url: str = Field(default="", description="Preview image URL.")
    audio_only: bool = Field(default=False, description="True for podcast style content.")

    @field_validator("duration")
    @classmethod
    def _reject_negative_duration(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("duration must not be negative")
        return value


class CacheSnapshot(BaseModel):
    """Serialized form of the cache as written to disk."""

    items: dict[str, MediaItem] = Field(default_factory=dict)
    last_refreshed_at: datetime | None = Field(
        default=None, description="Timestamp of the last successful full refresh."
    )

    @field_validator("last_refreshed_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class FilterParams(BaseModel):
    """Predicates applied by the query engine; empty or zero values disable a predicate."""

    language: str = Field(default="", description="Exact language match.")
    duration_min: timedelta = Field(default=timedelta(0), description="Inclusive lower bound.")
    duration_max: timedelta = Field(default=timedelta(0), description="Inclusive upper bound.")
    publish_year: int = Field(default=0, ge=0, description="Exact publish year match.")
    source: str = Field(default="", description="Case-sensitive substring of the click URL.")
