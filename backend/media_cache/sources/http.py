"""HTTP helpers shared by the network-backed sources."""
from __future__ import annotations

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..errors import DecodeError, UpstreamError

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:144.0) "
        "Gecko/20100101 Firefox/144.0"
    )
}

ModelT = TypeVar("ModelT", bound=BaseModel)


def create_client(*, timeout: float = 10.0, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """Instantiate an HTTPX client shared by every source during a refresh."""

    return httpx.Client(timeout=timeout, transport=transport, headers=REQUEST_HEADERS)


def get_json(
    client: httpx.Client,
    url: str,
    model: type[ModelT],
    *,
    params: dict[str, Any] | None = None,
    context: str,
) -> ModelT:
    """GET ``url`` and validate the JSON body against ``model``.

    ``context`` names the request in error messages, e.g. ``"video list for hi-IN"``.
    """

    try:
        response = client.get(url, params=params)
    except httpx.HTTPError as exc:
        raise UpstreamError(f"error getting {context}: {exc}") from exc

    if not response.is_success:
        raise UpstreamError(
            f"bad http status [{response.status_code}] while getting {context}"
        )

    try:
        payload = response.json()
    except ValueError as exc:
        raise DecodeError(f"error decoding {context}: invalid JSON") from exc

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(f"error decoding {context}: {exc}") from exc
