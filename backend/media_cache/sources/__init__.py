"""Upstream sources producing canonical media items."""

from .spotify import SpotifySnapshotSource
from .timelesstoday import TimelessTodaySource
from .youtube import YouTubeSource

__all__ = ["SpotifySnapshotSource", "TimelessTodaySource", "YouTubeSource"]
