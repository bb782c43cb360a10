"""
Field normalization helpers shared by the upstream sources.

Every helper is pure: it either returns the canonical value or raises
:class:`ParseError` naming the offending text.
"""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Callable, NamedTuple, Optional

from .errors import ParseError

HINDI = "hi-IN"
ENGLISH = "en-US"
SUPPORTED_LANGUAGES = frozenset({HINDI, ENGLISH})

LANGUAGE_ALIASES = {
    "hi": HINDI,
    "hi-IN": HINDI,
    "en": ENGLISH,
    "en-US": ENGLISH,
    "en-GB": ENGLISH,
}

DEVANAGARI_FIRST = "\u0900"
DEVANAGARI_LAST = "\u097f"

ZERO_DURATION_TOKEN = "P0D"
MACHINE_DURATION_PREFIX_LEN = 2

COMPOUND_DURATION_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ms|h|m|s)")
COMPOUND_UNITS = {
    "h": timedelta(hours=1),
    "m": timedelta(minutes=1),
    "s": timedelta(seconds=1),
    "ms": timedelta(milliseconds=1),
}

SENTENCE_BOUNDARY_RE = re.compile(r"([.!?])([A-Z])")

LEAP_YEAR = 2000

WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}


def contains_devanagari(text: str) -> bool:
    return any(DEVANAGARI_FIRST <= char <= DEVANAGARI_LAST for char in text)


def classify_language(audio_language: str, title: str) -> str:
    """Resolve an upstream audio-language tag to a canonical locale.

    Titles written in Devanagari are classified as Hindi whatever the tag says,
    since upstream audio tags are frequently wrong. Unknown tags pass through.
    """

    if contains_devanagari(title):
        return HINDI
    return LANGUAGE_ALIASES.get(audio_language, audio_language)


def parse_compound_duration(text: str) -> timedelta:
    """Parse durations such as ``1h2m3s``, ``20m`` or ``1.5h``."""

    value = text.strip().lower()
    if not value:
        raise ParseError(f"invalid duration: {text!r}")

    total = timedelta(0)
    position = 0
    for match in COMPOUND_DURATION_RE.finditer(value):
        if match.start() != position:
            break
        total += float(match.group(1)) * COMPOUND_UNITS[match.group(2)]
        position = match.end()
    if position != len(value):
        raise ParseError(f"invalid duration: {text!r}")
    return total


def parse_machine_duration(text: str) -> timedelta:
    """Parse ISO-8601 style durations reported by the streaming API (``PT1H2M3S``)."""

    if text == ZERO_DURATION_TOKEN:
        return timedelta(0)
    if len(text) <= MACHINE_DURATION_PREFIX_LEN:
        raise ParseError(f"invalid duration: {text!r}")
    return parse_compound_duration(text[MACHINE_DURATION_PREFIX_LEN:])


def _hours_minutes(match: re.Match[str]) -> timedelta:
    return timedelta(hours=int(match.group(1)), minutes=int(match.group(2)))


def _hours(match: re.Match[str]) -> timedelta:
    return timedelta(hours=int(match.group(1)))


def _minutes_seconds(match: re.Match[str]) -> timedelta:
    return timedelta(minutes=int(match.group(1)), seconds=int(match.group(2)))


def _minutes(match: re.Match[str]) -> timedelta:
    return timedelta(minutes=int(match.group(1)))


# Tried in order; the first pattern that matches the whole text wins.
HUMAN_DURATION_SHAPES: list[tuple[re.Pattern[str], Callable[[re.Match[str]], timedelta]]] = [
    (re.compile(r"(\d+) hr (\d+) min"), _hours_minutes),
    (re.compile(r"(\d+) hr"), _hours),
    (re.compile(r"(\d+) min (\d+) sec"), _minutes_seconds),
    (re.compile(r"(\d+) min"), _minutes),
]


def parse_human_duration(text: str) -> timedelta:
    """Parse listing durations: ``1 hr 12 min``, ``1 hr``, ``22 min 39 sec`` or ``37 min``."""

    value = " ".join(text.split())
    for pattern, build in HUMAN_DURATION_SHAPES:
        match = pattern.fullmatch(value)
        if match:
            return build(match)
    raise ParseError(f"invalid duration format: {text!r}")


def most_recent_weekday(reference: date, weekday: int) -> date:
    """Return the latest date on or before ``reference`` falling on ``weekday`` (Monday=0)."""

    diff = (reference.weekday() - weekday) % 7
    return reference - timedelta(days=diff)


class ListingDate(NamedTuple):
    """Publish date of a listing entry; ``day`` is 0 when the listing omits it."""

    year: int
    month: int
    day: int

    @classmethod
    def from_date(cls, value: date) -> ListingDate:
        return cls(value.year, value.month, value.day)


def _weekday_date(text: str, reference: date) -> Optional[ListingDate]:
    weekday = WEEKDAYS.get(text.lower())
    if weekday is None:
        return None
    return ListingDate.from_date(most_recent_weekday(reference, weekday))


def _strptime_date(text: str, layout: str) -> Optional[date]:
    try:
        return datetime.strptime(text, layout).date()
    except ValueError:
        return None


def _full_date(text: str, reference: date) -> Optional[ListingDate]:
    parsed = _strptime_date(text, "%b %d, %Y")
    return ListingDate.from_date(parsed) if parsed else None


def _month_year(text: str, reference: date) -> Optional[ListingDate]:
    parsed = _strptime_date(text, "%b %Y")
    return ListingDate(parsed.year, parsed.month, 0) if parsed else None


def _month_day(text: str, reference: date) -> Optional[ListingDate]:
    # Parsed against a leap year; Feb 29 rolls over to Mar 1 in other years.
    parsed = _strptime_date(f"{text} {LEAP_YEAR}", "%b %d %Y")
    if parsed is None:
        return None
    first_of_month = date(reference.year, parsed.month, 1)
    return ListingDate.from_date(first_of_month + timedelta(days=parsed.day - 1))


DATE_SHAPES: list[Callable[[str, date], Optional[ListingDate]]] = [
    _weekday_date,
    _full_date,
    _month_year,
    _month_day,
]


def parse_listing_date(text: str, reference: date) -> ListingDate:
    """Parse a weekday name or an abbreviated absolute date relative to ``reference``."""

    value = text.strip()
    if value:
        for shape in DATE_SHAPES:
            parsed = shape(value, reference)
            if parsed is not None:
                return parsed
    raise ParseError(f"unrecognized date: {text!r}")


def normalize_text(text: str) -> str:
    """Collapse whitespace and split sentences glued together by markup extraction."""

    collapsed = " ".join(text.split())
    return SENTENCE_BOUNDARY_RE.sub(r"\1 \2", collapsed).strip()
