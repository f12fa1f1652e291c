"""Ready-made HTTP producers built on httpx.

Each helper returns a zero-argument producer for ``CacheStore.cache`` /
``cache_sync``. Retries and timeouts are the client's business.

Usage:
    client = httpx.AsyncClient(base_url="https://api.example.com")
    books = await store.cache("books", http_json(client, "/books"))
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import httpx


def http_json(
    client: httpx.AsyncClient, url: str, **kwargs: Any
) -> Callable[[], Awaitable[Any]]:
    """Async producer: GET ``url`` and return the decoded JSON body.

    Raises ``httpx.HTTPStatusError`` on a 4xx/5xx response.
    """

    async def produce() -> Any:
        response = await client.get(url, **kwargs)
        response.raise_for_status()
        return response.json()

    return produce


def http_json_sync(
    client: httpx.Client, url: str, **kwargs: Any
) -> Callable[[], Any]:
    """Sync counterpart of ``http_json``."""

    def produce() -> Any:
        response = client.get(url, **kwargs)
        response.raise_for_status()
        return response.json()

    return produce


__all__ = ["http_json", "http_json_sync"]
