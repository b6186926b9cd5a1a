"""Small TTL cache for the dashboard payload.

A full /api/stats build issues ~6 GA4 queries per range per property, so
page reloads within the TTL reuse the last payload instead.

Usage:
    cached = response_cache.get("stats")
    if cached is None:
        cached = await service.fetch_dashboard()
        response_cache.set("stats", cached, ttl=settings.stats_cache_ttl)
"""
import threading
import time
from typing import Any


class ResponseCache:
    """Thread-safe in-memory cache with TTL expiry."""

    def __init__(self):
        self._store: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if time.monotonic() > expires_at:
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: int = 60) -> None:
        if ttl <= 0:
            return
        with self._lock:
            self._store[key] = (time.monotonic() + ttl, value)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
