"""
Manual corrections applied on top of the merged sources.

The table is plain data (see ``data/overrides.json``) so corrections can be
edited without touching the code that applies them. Operations run in a fixed
order: language patches, deletions, then inserts, which gives inserted items
the final word.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, ValidationError

from .errors import PersistenceError
from .schemas import MediaItem

if TYPE_CHECKING:
    from .store import MediaCache

logger = logging.getLogger(__name__)


class OverrideTable(BaseModel):
    """Hand-authored corrections keyed by media item id."""

    language_patches: dict[str, str] = Field(
        default_factory=dict, description="Item id to corrected language."
    )
    deletions: list[str] = Field(default_factory=list, description="Item ids to drop.")
    inserts: list[MediaItem] = Field(
        default_factory=list, description="Fully specified items inserted unconditionally."
    )


def load_override_table(path: Path) -> OverrideTable:
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise PersistenceError(f"error reading override table [{path}]: {exc}") from exc
    try:
        return OverrideTable.model_validate(payload)
    except ValidationError as exc:
        raise PersistenceError(f"invalid override table [{path}]: {exc}") from exc


def apply_overrides(cache: MediaCache, table: OverrideTable) -> None:
    """Apply ``table`` to ``cache`` in place."""

    for item_id, language in table.language_patches.items():
        item = cache.get(item_id)
        if item is None:
            continue
        cache.set(item.model_copy(update={"language": language}))
        logger.info("updated item %s language to %s", item_id, language)

    for item_id in table.deletions:
        if cache.delete(item_id):
            logger.info("removed item %s", item_id)

    for item in table.inserts:
        cache.set(item)
    if table.inserts:
        logger.info("inserted %d curated items", len(table.inserts))
