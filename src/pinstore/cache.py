"""
Process-wide cache for per-wallet file listings.

Entries are valid only while ``now - captured_at < ttl``. The cache is
advisory: a miss always falls back to the database.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_LIST_TTL_SECONDS = 30.0


@dataclass(frozen=True)
class CacheEntry:
    data: list[dict[str, Any]]
    captured_at: float


class ListCache:
    """TTL-on-read mapping from wallet address to its latest file listing."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_LIST_TTL_SECONDS,
        *,
        namespace: str = "files",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._ns = (namespace + ":") if namespace else ""
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _k(self, wallet_address: str) -> str:
        return self._ns + wallet_address

    async def get(self, wallet_address: str) -> Optional[list[dict[str, Any]]]:
        key = self._k(wallet_address)
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if self._clock() - entry.captured_at < self.ttl_seconds:
                return entry.data
            # expired
            self._store.pop(key, None)
        logger.debug("List cache entry expired for %s", wallet_address)
        return None

    async def set(self, wallet_address: str, data: list[dict[str, Any]]) -> None:
        entry = CacheEntry(data=data, captured_at=self._clock())
        with self._lock:
            self._store[self._k(wallet_address)] = entry

    async def invalidate(self, wallet_address: str) -> None:
        with self._lock:
            self._store.pop(self._k(wallet_address), None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
