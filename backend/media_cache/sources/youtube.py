"""
Streaming source backed by the YouTube Data API v3.

Each channel handle is resolved to its uploads playlist, which is then paged
through. Videos already present in the previous cache are carried forward
without a metadata lookup to keep API quota usage bounded.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Mapping, Optional

import httpx
from pydantic import BaseModel, Field

from ..errors import UpstreamError
from ..normalize import SUPPORTED_LANGUAGES, classify_language, parse_machine_duration
from ..schemas import MediaItem
from .http import get_json

logger = logging.getLogger(__name__)

BASE_API_URL = "https://www.googleapis.com/youtube/v3"
CHANNELS_URL = f"{BASE_API_URL}/channels"
PLAYLIST_ITEMS_URL = f"{BASE_API_URL}/playlistItems"
VIDEOS_URL = f"{BASE_API_URL}/videos"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
PAGE_SIZE = 50


class _RelatedPlaylists(BaseModel):
    uploads: str


class _ChannelContentDetails(BaseModel):
    related_playlists: _RelatedPlaylists = Field(alias="relatedPlaylists")


class _Channel(BaseModel):
    content_details: _ChannelContentDetails = Field(alias="contentDetails")


class ChannelListResponse(BaseModel):
    items: List[_Channel] = Field(default_factory=list)


class _Thumbnail(BaseModel):
    url: str = ""


class _Thumbnails(BaseModel):
    medium: Optional[_Thumbnail] = None


class _ResourceId(BaseModel):
    video_id: str = Field(alias="videoId", min_length=1)


class _PlaylistSnippet(BaseModel):
    title: str = ""
    description: str = ""
    published_at: datetime = Field(alias="publishedAt")
    thumbnails: _Thumbnails = Field(default_factory=_Thumbnails)
    resource_id: _ResourceId = Field(alias="resourceId")


class _PlaylistItem(BaseModel):
    snippet: _PlaylistSnippet


class PlaylistPage(BaseModel):
    next_page_token: str = Field(default="", alias="nextPageToken")
    items: List[_PlaylistItem] = Field(default_factory=list)


class _VideoSnippet(BaseModel):
    title: str = ""
    default_audio_language: str = Field(default="", alias="defaultAudioLanguage")


class _VideoContentDetails(BaseModel):
    duration: str


class _Video(BaseModel):
    snippet: _VideoSnippet
    content_details: _VideoContentDetails = Field(alias="contentDetails")


class VideoListResponse(BaseModel):
    items: List[_Video] = Field(default_factory=list)


class YouTubeSource:
    """Collect uploads for a fixed list of channel handles."""

    name = "youtube"

    def __init__(self, client: httpx.Client, api_key: str | None, handles: Iterable[str]) -> None:
        self._client = client
        self._api_key = api_key
        self.handles = list(handles)

    def fetch(self, known: Mapping[str, MediaItem] | None = None) -> list[MediaItem]:
        """Return uploads of every handle; ``known`` items are reused unchanged."""

        if not self._api_key:
            raise UpstreamError("YouTube API key is not configured")

        known = known or {}
        items: list[MediaItem] = []
        for handle in self.handles:
            logger.info("getting videos from handle [%s]", handle)
            playlist_id = self.uploads_playlist_id(handle)
            items.extend(self.playlist_items(playlist_id, known))
        return items

    def uploads_playlist_id(self, handle: str) -> str:
        response = get_json(
            self._client,
            CHANNELS_URL,
            ChannelListResponse,
            params={"part": "contentDetails", "forHandle": handle, "key": self._api_key},
            context=f"playlist ID for [{handle}]",
        )
        if not response.items:
            raise UpstreamError(f"no playlist found for [{handle}]")
        return response.items[0].content_details.related_playlists.uploads

    def playlist_items(self, playlist_id: str, known: Mapping[str, MediaItem]) -> list[MediaItem]:
        items: list[MediaItem] = []
        page_token = ""
        page_no = 0
        while True:
            page_no += 1
            logger.debug(
                "getting page [%d] of playlist [%s], page token [%s]", page_no, playlist_id, page_token
            )
            page = get_json(
                self._client,
                PLAYLIST_ITEMS_URL,
                PlaylistPage,
                params={
                    "part": "snippet",
                    "maxResults": PAGE_SIZE,
                    "playlistId": playlist_id,
                    "key": self._api_key,
                    "pageToken": page_token,
                },
                context=f"page [{page_no}] of playlist [{playlist_id}]",
            )
            if not page.items:
                break

            for entry in page.items:
                item = self._to_media_item(entry.snippet, known)
                if item is not None:
                    items.append(item)

            page_token = page.next_page_token
            if not page_token:
                break
        return items

    def _to_media_item(self, snippet: _PlaylistSnippet, known: Mapping[str, MediaItem]) -> MediaItem | None:
        video_id = snippet.resource_id.video_id
        cached = known.get(video_id)
        if cached is not None:
            return cached

        language, duration = self.video_details(video_id)
        if duration == timedelta(0) or language not in SUPPORTED_LANGUAGES:
            logger.debug("skipping video [%s]: language=%r duration=%s", video_id, language, duration)
            return None

        medium = snippet.thumbnails.medium
        return MediaItem(
            id=video_id,
            title=snippet.title,
            description=snippet.description,
            duration=duration,
            language=language,
            click_url=WATCH_URL.format(video_id=video_id),
            publish_year=snippet.published_at.year,
            publish_month=snippet.published_at.month,
            publish_day=snippet.published_at.day,
            thumbnail_url=medium.url if medium else "",
        )

    def video_details(self, video_id: str) -> tuple[str, timedelta]:
        """Return the classified language and duration of one video."""

        response = get_json(
            self._client,
            VIDEOS_URL,
            VideoListResponse,
            params={"part": "snippet,contentDetails", "id": video_id, "key": self._api_key},
            context=f"meta for video [{video_id}]",
        )
        if not response.items:
            raise UpstreamError(f"no meta found for video [{video_id}]")

        video = response.items[0]
        duration = parse_machine_duration(video.content_details.duration)
        language = classify_language(video.snippet.default_audio_language, video.snippet.title)
        return language, duration
