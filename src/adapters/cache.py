"""
In-memory meta cache.

Implements MetaCachePort for single-process deployments and tests. Bags are
copied on the way in and out so callers cannot mutate cached entries.
"""

from __future__ import annotations

import copy
import threading
import time
from collections.abc import Callable
from typing import Any


class InMemoryMetaCache:
    """Dictionary-backed cache with per-entry expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float | None, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, meta = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._entries[key]
                return None
            return copy.deepcopy(meta)

    def set(self, key: str, meta: dict[str, Any], ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        with self._lock:
            self._entries[key] = (expires_at, copy.deepcopy(meta))

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every entry (e.g. after settings change)."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
