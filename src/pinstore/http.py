from __future__ import annotations

from typing import Any

import httpx


def new_async_httpx_client(
    *,
    timeout_seconds: float,
    transport: httpx.AsyncBaseTransport | None = None,
    **kwargs: Any,
) -> httpx.AsyncClient:
    """Async client with a single timeout applied to connect/read/write/pool."""
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds), transport=transport, **kwargs)
