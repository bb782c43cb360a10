"""
Persisted media cache and its refresh lifecycle.

A refresh is always a full rebuild: every source is queried, the results are
merged into a new cache, overrides are applied and the snapshot is written.
The live cache and the file on disk are only replaced once all of that
succeeded.
"""
from __future__ import annotations

import enum
import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterable, Iterator, Mapping, Protocol

from pydantic import ValidationError

from .errors import PersistenceError
from .overrides import OverrideTable, apply_overrides
from .schemas import CacheSnapshot, MediaItem

logger = logging.getLogger(__name__)

DEFAULT_STALE_AFTER = timedelta(hours=24)


class Source(Protocol):
    name: str

    def fetch(self) -> list[MediaItem]: ...


class KnownItemsSource(Protocol):
    name: str

    def fetch(self, known: Mapping[str, MediaItem] | None = None) -> list[MediaItem]: ...


class CacheState(str, enum.Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    STALE = "stale"
    REFRESHING = "refreshing"
    PERSISTED = "persisted"
    FAILED = "failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MediaCache:
    """In-memory mapping of item id to :class:`MediaItem`."""

    def __init__(
        self,
        items: Mapping[str, MediaItem] | None = None,
        last_refreshed_at: datetime | None = None,
    ) -> None:
        self.items: dict[str, MediaItem] = dict(items or {})
        self.last_refreshed_at = last_refreshed_at

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self.items

    def __iter__(self) -> Iterator[MediaItem]:
        return iter(self.items.values())

    def get(self, item_id: str) -> MediaItem | None:
        return self.items.get(item_id)

    def set(self, item: MediaItem) -> None:
        """Store ``item`` under its id, replacing any previous value in full."""

        self.items[item.id] = item

    def update(self, items: Iterable[MediaItem]) -> None:
        for item in items:
            self.set(item)

    def delete(self, item_id: str) -> bool:
        return self.items.pop(item_id, None) is not None

    def to_snapshot(self) -> CacheSnapshot:
        ordered = {item_id: self.items[item_id] for item_id in sorted(self.items)}
        return CacheSnapshot(items=ordered, last_refreshed_at=self.last_refreshed_at)

    @classmethod
    def from_snapshot(cls, snapshot: CacheSnapshot) -> MediaCache:
        return cls(snapshot.items, snapshot.last_refreshed_at)


class CacheStore:
    """Owns the persisted snapshot and orchestrates refreshes."""

    def __init__(
        self,
        path: Path,
        *,
        catalog: Source,
        streaming: KnownItemsSource,
        snapshot: Source,
        overrides: OverrideTable | None = None,
        stale_after: timedelta = DEFAULT_STALE_AFTER,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.path = Path(path)
        self._catalog = catalog
        self._streaming = streaming
        self._snapshot = snapshot
        self._overrides = overrides or OverrideTable()
        self._stale_after = stale_after
        self._clock = clock
        self._cache = MediaCache()
        self.state = CacheState.EMPTY

    @property
    def cache(self) -> MediaCache:
        return self._cache

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> MediaCache:
        """Replace the in-memory cache with the persisted snapshot."""

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"error reading cache file [{self.path}]: {exc}") from exc

        try:
            snapshot = CacheSnapshot.model_validate_json(raw)
        except ValidationError as exc:
            raise PersistenceError(f"error decoding cache file [{self.path}]: {exc}") from exc

        for item_id, item in snapshot.items.items():
            if item_id != item.id:
                raise PersistenceError(
                    f"cache file [{self.path}] stores item [{item.id}] under key [{item_id}]"
                )

        self._cache = MediaCache.from_snapshot(snapshot)
        self.state = CacheState.STALE if self.is_stale() else CacheState.LOADED
        logger.info("loaded %d items from %s", len(self._cache), self.path)
        return self._cache

    def is_stale(self, now: datetime | None = None) -> bool:
        refreshed_at = self._cache.last_refreshed_at
        if refreshed_at is None:
            return True
        now = now or self._clock()
        return now - refreshed_at > self._stale_after

    def save(self, cache: MediaCache | None = None) -> None:
        """Atomically write ``cache`` (the live cache by default) to disk."""

        if cache is None:
            cache = self._cache
        payload = cache.to_snapshot().model_dump(mode="json")
        text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(text, encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"error writing cache file [{self.path}]: {exc}") from exc

    def refresh(self) -> MediaCache:
        """Rebuild the cache from every source and persist it."""

        self.state = CacheState.REFRESHING
        known = dict(self._cache.items)
        staged = MediaCache()
        try:
            catalog_items = self._catalog.fetch()
            logger.info("total items retrieved from %s: %d", self._catalog.name, len(catalog_items))

            streaming_items = self._streaming.fetch(known=known)
            logger.info("total items retrieved from %s: %d", self._streaming.name, len(streaming_items))

            snapshot_items = self._snapshot.fetch()
            logger.info("total items retrieved from %s: %d", self._snapshot.name, len(snapshot_items))

            # Later sources win on id collisions.
            staged.update(catalog_items)
            staged.update(streaming_items)
            staged.update(snapshot_items)
            apply_overrides(staged, self._overrides)

            staged.last_refreshed_at = self._clock()
            self.save(staged)
        except Exception:
            self.state = CacheState.FAILED
            raise

        self._cache = staged
        self.state = CacheState.PERSISTED
        logger.info("cache refreshed with %d items", len(staged))
        return staged

    def ensure_fresh(self, *, force: bool = False) -> MediaCache:
        """Return a cache no older than the staleness threshold.

        ``force`` always refreshes, but still loads an existing snapshot first
        so already known streaming items are reused.
        """

        if not self.exists():
            logger.info("cache file %s does not exist, downloading", self.path)
            return self.refresh()

        if force:
            logger.info("update for cache requested")
            try:
                self.load()
            except PersistenceError as exc:
                logger.warning("ignoring unreadable cache file before refresh: %s", exc)
            return self.refresh()

        self.load()
        if self.state is CacheState.STALE:
            logger.info("cache is older than %s, downloading", self._stale_after)
            return self.refresh()
        return self._cache
