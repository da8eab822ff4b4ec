"""In-memory cache for holiday lookups.

One instance is created per process and handed to `FeiertageClient`. Entries
expire a fixed time after insertion; there is no size-based eviction.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Any, Callable, Hashable

from cachetools import TTLCache

DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60


class HolidayCache:
    """Lock-guarded `TTLCache` with an injectable clock."""

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        self._cache: TTLCache = TTLCache(maxsize=math.inf, ttl=ttl_seconds, timer=clock)
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._cache.ttl

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value, or None when absent or expired."""

        with self._lock:
            return self._cache.get(key)

    def set(self, key: Hashable, value: Any) -> None:
        # re-setting a key restarts its TTL
        with self._lock:
            self._cache[key] = value

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)
