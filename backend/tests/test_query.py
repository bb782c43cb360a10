"""Tests for filtering and ordering cached items."""
from __future__ import annotations

import sys
from datetime import timedelta
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.media_cache.query import filter_items  # noqa: E402
from backend.media_cache.schemas import FilterParams, MediaItem  # noqa: E402


def make_item(
    item_id: str,
    year: int,
    month: int,
    *,
    minutes: int = 30,
    language: str = "en-US",
    url: str = "https://www.youtube.com/watch?v=",
) -> MediaItem:
    return MediaItem(
        id=item_id,
        title=item_id,
        duration=timedelta(minutes=minutes),
        language=language,
        click_url=f"{url}{item_id}",
        publish_year=year,
        publish_month=month,
    )


@pytest.fixture()
def items() -> dict[str, MediaItem]:
    values = [
        make_item("may-2023", 2023, 5, minutes=10, language="hi-IN"),
        make_item("jan-2024", 2024, 1, minutes=45, url="https://www.timelesstoday.tv/en/home/product/"),
        make_item("mar-2024", 2024, 3, minutes=72, url="https://open.spotify.com/episode/"),
    ]
    return {item.id: item for item in values}


def test_no_predicates_sorts_newest_first(items: dict[str, MediaItem]) -> None:
    result = filter_items(items, FilterParams())

    assert [item.id for item in result] == ["mar-2024", "jan-2024", "may-2023"]


def test_accepts_plain_iterables(items: dict[str, MediaItem]) -> None:
    result = filter_items(list(items.values()))

    assert [item.id for item in result] == ["mar-2024", "jan-2024", "may-2023"]


def test_language_filter_is_exact(items: dict[str, MediaItem]) -> None:
    result = filter_items(items, FilterParams(language="hi-IN"))

    assert [item.id for item in result] == ["may-2023"]
    assert filter_items(items, FilterParams(language="hi")) == []


def test_duration_bounds_are_inclusive(items: dict[str, MediaItem]) -> None:
    params = FilterParams(duration_min=timedelta(minutes=10), duration_max=timedelta(minutes=45))

    result = filter_items(items, params)

    assert [item.id for item in result] == ["jan-2024", "may-2023"]


def test_zero_duration_bound_means_unbounded(items: dict[str, MediaItem]) -> None:
    result = filter_items(items, FilterParams(duration_min=timedelta(minutes=40)))

    assert [item.id for item in result] == ["mar-2024", "jan-2024"]


def test_publish_year_filter(items: dict[str, MediaItem]) -> None:
    result = filter_items(items, FilterParams(publish_year=2024))

    assert [item.id for item in result] == ["mar-2024", "jan-2024"]


def test_source_filter_is_case_sensitive_substring(items: dict[str, MediaItem]) -> None:
    assert [item.id for item in filter_items(items, FilterParams(source="spotify"))] == ["mar-2024"]
    assert filter_items(items, FilterParams(source="Spotify")) == []


def test_predicates_are_combined(items: dict[str, MediaItem]) -> None:
    params = FilterParams(publish_year=2024, source="timelesstoday", duration_max=timedelta(minutes=50))

    result = filter_items(items, params)

    assert [item.id for item in result] == ["jan-2024"]


def test_equal_year_and_month_keep_input_order() -> None:
    first = make_item("first", 2024, 6)
    second = make_item("second", 2024, 6)

    result = filter_items([first, second])

    assert [item.id for item in result] == ["first", "second"]
