"""
Catalog source backed by the TimelessToday CMS API.

One bulk request per locale returns the full product list; there is no
pagination.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, List

import httpx
from pydantic import AliasChoices, BaseModel, Field

from ..normalize import ENGLISH, HINDI
from ..schemas import MediaItem
from .http import get_json

logger = logging.getLogger(__name__)

LIST_CONTENT_URL = "https://api3.timelesstoday.io/v2/cms/products/en-US/language/{locale}/10000/0"
PRODUCT_URL = "https://www.timelesstoday.tv/{code}/home/product/{media_id}"

LOCALE_CODES = {ENGLISH: "en", HINDI: "hi"}
DEFAULT_LOCALE_CODE = "en"


class CatalogRecord(BaseModel):
    name: str = Field(validation_alias=AliasChoices("tt_name", "name"))
    duration_seconds: int = Field(
        ge=0, validation_alias=AliasChoices("tt_duration", "duration_seconds")
    )
    source_language: str = Field(
        validation_alias=AliasChoices("tt_source_language", "source_language")
    )
    media_id: str = Field(
        min_length=1, validation_alias=AliasChoices("tt_media_uuid", "media_id")
    )
    publish_date: datetime = Field(
        validation_alias=AliasChoices("tt_publishing_date", "publish_date")
    )
    thumbnail_url: str = Field(
        default="", validation_alias=AliasChoices("tt_image_url", "thumbnail_url")
    )


class CatalogEnvelope(BaseModel):
    data: List[CatalogRecord] = Field(default_factory=list)


def product_url(media_id: str, language: str) -> str:
    code = LOCALE_CODES.get(language, DEFAULT_LOCALE_CODE)
    return PRODUCT_URL.format(code=code, media_id=media_id)


def to_media_item(record: CatalogRecord) -> MediaItem:
    return MediaItem(
        id=record.media_id,
        title=record.name,
        duration=timedelta(seconds=record.duration_seconds),
        language=record.source_language,
        click_url=product_url(record.media_id, record.source_language),
        publish_year=record.publish_date.year,
        publish_month=record.publish_date.month,
        publish_day=record.publish_date.day,
        thumbnail_url=record.thumbnail_url,
    )


class TimelessTodaySource:
    """Fetch every catalog product for a fixed set of locales."""

    name = "timelesstoday"

    def __init__(self, client: httpx.Client, locales: Iterable[str] = (HINDI, ENGLISH)) -> None:
        self._client = client
        self.locales = list(locales)

    def fetch(self) -> list[MediaItem]:
        items: list[MediaItem] = []
        for locale in self.locales:
            items.extend(self.fetch_locale(locale))
        return items

    def fetch_locale(self, locale: str) -> list[MediaItem]:
        logger.info("getting catalog list for locale %s", locale)
        envelope = get_json(
            self._client,
            LIST_CONTENT_URL.format(locale=locale),
            CatalogEnvelope,
            context=f"catalog list for locale [{locale}]",
        )
        return [to_media_item(record) for record in envelope.data]
