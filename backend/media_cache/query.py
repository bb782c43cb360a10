"""Read-only filtering and ordering over the cached items."""
from __future__ import annotations

from datetime import timedelta
from typing import Iterable, Mapping, Union

from .schemas import FilterParams, MediaItem

ItemCollection = Union[Mapping[str, MediaItem], Iterable[MediaItem]]


def matches(item: MediaItem, params: FilterParams) -> bool:
    if params.language and item.language != params.language:
        return False
    if params.duration_min > timedelta(0) and item.duration < params.duration_min:
        return False
    if params.duration_max > timedelta(0) and item.duration > params.duration_max:
        return False
    if params.publish_year and item.publish_year != params.publish_year:
        return False
    if params.source and params.source not in item.click_url:
        return False
    return True


def sort_by_publish_date(items: Iterable[MediaItem]) -> list[MediaItem]:
    """Order newest first by publish year, then publish month."""

    return sorted(items, key=lambda item: (item.publish_year, item.publish_month), reverse=True)


def filter_items(items: ItemCollection, params: FilterParams | None = None) -> list[MediaItem]:
    """Return the items satisfying every active predicate, newest first."""

    params = params or FilterParams()
    values = items.values() if isinstance(items, Mapping) else items
    return sort_by_publish_date(item for item in values if matches(item, params))
