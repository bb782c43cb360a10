"""Tests for the field normalization helpers."""
from __future__ import annotations

import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.media_cache.errors import ParseError  # noqa: E402
from backend.media_cache.normalize import (  # noqa: E402
    ENGLISH,
    HINDI,
    ListingDate,
    classify_language,
    most_recent_weekday,
    normalize_text,
    parse_compound_duration,
    parse_human_duration,
    parse_listing_date,
    parse_machine_duration,
)

REFERENCE = date(2026, 1, 27)  # a Tuesday


def test_devanagari_title_overrides_audio_tag() -> None:
    """A title containing Devanagari is Hindi even when tagged as English."""

    assert classify_language("en-US", "Prem Rawat ह interview") == HINDI


@pytest.mark.parametrize("tag", ["en-GB", "en-US", "en"])
def test_english_variants_map_to_canonical_locale(tag: str) -> None:
    assert classify_language(tag, "Peace Is Possible") == ENGLISH


@pytest.mark.parametrize("tag", ["hi", "hi-IN"])
def test_hindi_tags_map_to_canonical_locale(tag: str) -> None:
    assert classify_language(tag, "Interview") == HINDI


def test_unknown_language_tag_passes_through() -> None:
    assert classify_language("fr-FR", "Entretien") == "fr-FR"
    assert classify_language("", "Untitled") == ""


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("PT1H2M3S", timedelta(hours=1, minutes=2, seconds=3)),
        ("PT43M49S", timedelta(minutes=43, seconds=49)),
        ("PT59S", timedelta(seconds=59)),
        ("P0D", timedelta(0)),
    ],
)
def test_machine_duration_parsing(text: str, expected: timedelta) -> None:
    assert parse_machine_duration(text) == expected


@pytest.mark.parametrize("text", ["", "PT", "PT1X", "P1DT2H", "garbage"])
def test_malformed_machine_duration_fails(text: str) -> None:
    with pytest.raises(ParseError):
        parse_machine_duration(text)


def test_compound_duration_accepts_fractional_values() -> None:
    assert parse_compound_duration("1.5h") == timedelta(minutes=90)
    assert parse_compound_duration("20m30s") == timedelta(minutes=20, seconds=30)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1 hr 12 min", timedelta(minutes=72)),
        ("37 min", timedelta(minutes=37)),
        ("22 min 39 sec", timedelta(minutes=22, seconds=39)),
        ("1 hr", timedelta(minutes=60)),
        ("  37   min ", timedelta(minutes=37)),
    ],
)
def test_human_duration_table(text: str, expected: timedelta) -> None:
    assert parse_human_duration(text) == expected


@pytest.mark.parametrize("text", ["45 sec", "", "1 hour", "1 hr 5 sec", "abc min"])
def test_unsupported_human_duration_fails_with_offending_text(text: str) -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_human_duration(text)

    assert repr(text) in str(excinfo.value)


def test_most_recent_weekday_is_inclusive_of_reference() -> None:
    assert most_recent_weekday(REFERENCE, REFERENCE.weekday()) == REFERENCE
    assert most_recent_weekday(REFERENCE, 0) == date(2026, 1, 26)
    assert most_recent_weekday(REFERENCE, 2) == date(2026, 1, 21)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Tuesday", ListingDate(2026, 1, 27)),
        ("sunday", ListingDate(2026, 1, 25)),
        ("Dec 3, 2025", ListingDate(2025, 12, 3)),
        ("Nov 2025", ListingDate(2025, 11, 0)),
        ("Jan 14", ListingDate(2026, 1, 14)),
    ],
)
def test_listing_date_shapes(text: str, expected: ListingDate) -> None:
    assert parse_listing_date(text, REFERENCE) == expected


def test_year_less_date_uses_reference_year_for_leap_days() -> None:
    assert parse_listing_date("Feb 29", date(2024, 3, 1)) == ListingDate(2024, 2, 29)


def test_year_less_leap_day_rolls_over_in_common_years() -> None:
    assert parse_listing_date("Feb 29", REFERENCE) == ListingDate(2026, 3, 1)


@pytest.mark.parametrize("text", ["", "yesterday", "2025-12-03", "Smarch 3"])
def test_unrecognized_listing_date_fails(text: str) -> None:
    with pytest.raises(ParseError):
        parse_listing_date(text, REFERENCE)


def test_normalize_text_collapses_whitespace_and_splits_sentences() -> None:
    raw = "  The past is gone.The future\n\n is not here yet!What   we have is now.  "

    assert normalize_text(raw) == "The past is gone. The future is not here yet! What we have is now."


def test_normalize_text_leaves_lowercase_continuations_alone() -> None:
    assert normalize_text("version 1.5 is out.then more") == "version 1.5 is out.then more"
