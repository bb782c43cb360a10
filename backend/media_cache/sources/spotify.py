"""
Static snapshot source built from a saved Spotify show page.

The listing is curated input: a block that looks like an episode must carry a
title, a date and a duration, otherwise the refresh is aborted.
"""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from ..errors import ParseError, PersistenceError
from ..normalize import ENGLISH, normalize_text, parse_human_duration, parse_listing_date
from ..schemas import MediaItem

logger = logging.getLogger(__name__)

EPISODE_URL = "https://open.spotify.com/episode/{episode_id}"
EPISODE_HREF_PREFIX = "/episode/"

EPISODE_BLOCK_SELECTOR = '[data-testid^="episode-"]'
EPISODE_LINK_SELECTOR = 'a[href^="/episode/"]'
DESCRIPTION_SELECTOR = '[data-encore-id="listRowDetails"]'
DATE_SELECTOR = ".IUdud5e6dwtIrdfU [data-encore-id=text]"
DURATION_SELECTOR = '[data-testid="episode-progress-not-played"]'
PREFERRED_THUMBNAIL_WIDTH = "640w"


def extract_best_thumbnail(block: Tag) -> str:
    """Prefer the 640px candidate of ``srcset``, falling back to ``src``."""

    img = block.find("img")
    if img is None:
        return ""

    srcset = img.get("srcset")
    if srcset:
        for candidate in srcset.split(","):
            candidate = candidate.strip()
            if candidate.endswith(PREFERRED_THUMBNAIL_WIDTH):
                return candidate.split(" ")[0]

    return img.get("src") or ""


def _selected_text(block: Tag, selector: str) -> str:
    element = block.select_one(selector)
    return element.get_text() if element is not None else ""


def parse_episode(block: Tag, reference: date) -> MediaItem | None:
    """Convert one marked block; returns ``None`` when the block is not an episode."""

    link = block.select_one(EPISODE_LINK_SELECTOR)
    if link is None:
        return None

    episode_id = link["href"].removeprefix(EPISODE_HREF_PREFIX).strip()
    if not episode_id:
        raise ParseError("no episode ID found in episode link")

    title = normalize_text(link.get_text())
    if not title:
        raise ParseError(f"no title found for episode [{episode_id}]")

    description = normalize_text(_selected_text(block, DESCRIPTION_SELECTOR))

    date_text = _selected_text(block, DATE_SELECTOR).strip()
    try:
        published = parse_listing_date(date_text, reference)
    except ParseError as exc:
        raise ParseError(f"error parsing date for episode [{episode_id}]: {exc}") from exc

    duration_text = _selected_text(block, DURATION_SELECTOR).strip()
    try:
        duration = parse_human_duration(duration_text)
    except ParseError as exc:
        raise ParseError(f"error parsing duration for episode [{episode_id}]: {exc}") from exc

    return MediaItem(
        id=episode_id,
        title=title,
        description=description,
        duration=duration,
        language=ENGLISH,
        click_url=EPISODE_URL.format(episode_id=episode_id),
        publish_year=published.year,
        publish_month=published.month,
        publish_day=published.day,
        thumbnail_url=extract_best_thumbnail(block),
        audio_only=True,
    )


def parse_listing(markup: str, reference: date) -> list[MediaItem]:
    soup = BeautifulSoup(markup, "html.parser")
    items: list[MediaItem] = []
    for block in soup.select(EPISODE_BLOCK_SELECTOR):
        item = parse_episode(block, reference)
        if item is not None:
            items.append(item)
    return items


class SpotifySnapshotSource:
    """Read podcast episodes from a locally stored listing document."""

    name = "spotify"

    def __init__(self, path: Path, reference_date: date) -> None:
        self.path = Path(path)
        self.reference_date = reference_date

    def fetch(self) -> list[MediaItem]:
        try:
            markup = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"error reading snapshot document [{self.path}]: {exc}") from exc
        logger.info("parsing episode listing %s", self.path)
        return parse_listing(markup, self.reference_date)
