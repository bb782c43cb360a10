"""Command line interface for browsing the media cache."""
from __future__ import annotations

import calendar
import json
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

import typer

from backend.media_cache.errors import MediaCacheError, ParseError
from backend.media_cache.normalize import parse_compound_duration
from backend.media_cache.query import filter_items
from backend.media_cache.schemas import FilterParams, MediaItem
from backend.media_cache.settings import CacheSettings
from backend.media_cache.state import AppState


app = typer.Typer(help="Browse the locally cached media library.")

SOURCE_ALIASES = {"tt": "timelesstoday"}


def _cache_path_option() -> typer.Option:
    return typer.Option(
        None,
        "--cache-path",
        help="Location of the persisted cache snapshot.",
        envvar="MEDIA_CACHE_CACHE_PATH",
    )


def _load_settings(cache_path: Optional[Path]) -> CacheSettings:
    settings = CacheSettings()
    if cache_path is not None:
        settings = settings.model_copy(update={"cache_path": cache_path})
    return settings


def _parse_duration_option(value: Optional[str], option: str) -> timedelta:
    if not value:
        return timedelta(0)
    try:
        return parse_compound_duration(value)
    except ParseError as exc:
        raise typer.BadParameter(str(exc), param_hint=option) from exc


def _format_item(item: MediaItem) -> str:
    month = calendar.month_name[item.publish_month] or "Unknown"
    return (
        f"[{item.title}] in [{month}-{item.publish_year}] "
        f"of [{item.duration}]: {item.click_url}"
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Configure logging for every command."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("list")
def list_items(
    lang: str = typer.Option("", "--lang", help="Filter by language [en-US, hi-IN]."),
    min_duration: Optional[str] = typer.Option(
        None, "--min-duration", help="Minimum duration such as 30s, 20m or 1h."
    ),
    max_duration: Optional[str] = typer.Option(
        None, "--max-duration", help="Maximum duration such as 30s, 20m or 1h."
    ),
    publish_year: int = typer.Option(0, "--publish-year", min=0, help="Filter by publish year."),
    source: str = typer.Option(
        "", "--source", help="Filter by source [youtube, tt, spotify]."
    ),
    update: bool = typer.Option(False, "--update", help="Refresh the cache before filtering."),
    as_json: bool = typer.Option(False, "--json", help="Print matching items as JSON."),
    cache_path: Optional[Path] = _cache_path_option(),
) -> None:
    """List cached items matching the filters, newest first."""

    params = FilterParams(
        language=lang,
        duration_min=_parse_duration_option(min_duration, "--min-duration"),
        duration_max=_parse_duration_option(max_duration, "--max-duration"),
        publish_year=publish_year,
        source=SOURCE_ALIASES.get(source, source),
    )

    try:
        with AppState(_load_settings(cache_path)) as state:
            cache = state.store.ensure_fresh(force=update)
    except MediaCacheError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    items = filter_items(cache.items, params)
    if as_json:
        payload = [item.model_dump(mode="json") for item in items]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    typer.echo(f"total filtered items latest to oldest: {len(items)}")
    for item in items:
        typer.echo(_format_item(item))


@app.command()
def refresh(cache_path: Optional[Path] = _cache_path_option()) -> None:
    """Rebuild the cache from every source regardless of its age."""

    try:
        with AppState(_load_settings(cache_path)) as state:
            cache = state.store.ensure_fresh(force=True)
    except MediaCacheError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"cache refreshed with {len(cache)} items")


@app.command()
def show(
    item_id: str = typer.Argument(..., help="Identifier of the item to display."),
    cache_path: Optional[Path] = _cache_path_option(),
) -> None:
    """Display a single cached item as JSON."""

    try:
        with AppState(_load_settings(cache_path)) as state:
            cache = state.store.ensure_fresh()
    except MediaCacheError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    item = cache.get(item_id)
    if item is None:
        typer.echo("Item not found", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(item.model_dump(mode="json"), indent=2, ensure_ascii=False))
