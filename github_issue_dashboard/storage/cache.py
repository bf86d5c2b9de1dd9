"""In-memory TTL cache for parse and graph results."""

import hashlib
import json
import logging
import threading
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 1024


def make_key(namespace: str, payload: Any) -> str:
    """Stable cache key from a namespace and JSON-serializable content."""
    encoded = json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str)
    digest = hashlib.sha256(encoded.encode("utf-8")).hexdigest()
    return f"{namespace}:{digest}"


class ResultCache:
    """Dictionary cache whose entries expire after a fixed number of seconds.

    Expired entries are purged on every write, and once ``max_entries`` is
    reached the oldest entry is evicted first.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] | None = None,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock or time.monotonic
        # insertion order is storage order, oldest first
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def get(self, key: str) -> Any | None:
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            value, stored_at = item
            if self._expired(stored_at, self._clock()):
                del self._entries[key]
                return None
        logger.debug(f"Cache hit for {key}")
        return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            now = self._clock()
            self._entries.pop(key, None)
            self._purge(now)
            while len(self._entries) >= self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                logger.debug(f"Evicted {oldest} from a full cache")
            self._entries[key] = (value, now)

    def _purge(self, now: float) -> None:
        expired = []
        for key, (_, stored_at) in self._entries.items():
            if not self._expired(stored_at, now):
                break
            expired.append(key)
        for key in expired:
            del self._entries[key]

    def get_or_compute(self, key: str, compute: Callable[[], Any]) -> Any:
        cached = self.get(key)
        if cached is not None:
            return cached
        value = compute()
        self.set(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
