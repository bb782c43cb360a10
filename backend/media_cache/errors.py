"""Exception hierarchy raised while building and reading the media cache."""
from __future__ import annotations


class MediaCacheError(RuntimeError):
    """Base class for every failure surfaced by the media cache."""


class UpstreamError(MediaCacheError):
    """Raised when a provider cannot be reached or answers with a non-success status."""


class DecodeError(MediaCacheError):
    """Raised when a provider response body does not have the expected shape."""


class ParseError(MediaCacheError, ValueError):
    """Raised when a date, duration or text field has an unrecognized shape."""


class PersistenceError(MediaCacheError):
    """Raised when the persisted snapshot cannot be read or written."""
