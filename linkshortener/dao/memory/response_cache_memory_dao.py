"""In-process implementation of ResponseCacheBaseDAO.

Entries expire `ttl` seconds after insertion. Expired entries are treated as
misses and dropped lazily on access; purge() drops all of them eagerly.
"""

import copy
import threading
from datetime import datetime, timedelta, UTC

from linkshortener.models import ResponseKey
from linkshortener.types import ResponsePayload
from linkshortener.dao.base import ResponseCacheBaseDAO
from linkshortener.dao.exceptions import CacheMissError


class ResponseCacheMemoryDAO(ResponseCacheBaseDAO):
    """Thread-safe TTL cache of read responses

    Payloads are deep-copied in and out so callers can't mutate cached snapshots.
    """

    def __init__(self):
        self._entries: dict[ResponseKey, tuple[datetime, ResponsePayload]] = {}
        self._epochs: dict[str, int] = {}
        self._lock = threading.Lock()

    def get(self, key: ResponseKey) -> ResponsePayload:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0] <= datetime.now(UTC):
                del self._entries[key]
                entry = None
        if entry is None:
            raise CacheMissError(f"No cached {key.operation} response for code '{key.shortcode}'.")
        return copy.deepcopy(entry[1])

    def put(self, key: ResponseKey, value: ResponsePayload, ttl: int, epoch: int | None = None) -> bool:
        expires_at = datetime.now(UTC) + timedelta(seconds=ttl)
        with self._lock:
            if epoch is not None and self._epochs.get(key.shortcode, 0) != epoch:
                return False
            self._entries[key] = (expires_at, copy.deepcopy(value))
        return True

    def epoch(self, shortcode: str) -> int:
        with self._lock:
            return self._epochs.get(shortcode, 0)

    def invalidate(self, shortcode: str) -> None:
        with self._lock:
            self._epochs[shortcode] = self._epochs.get(shortcode, 0) + 1
            for key in [key for key in self._entries if key.shortcode == shortcode]:
                del self._entries[key]

    def purge(self) -> int:
        """Drop every expired entry, returning how many were removed"""
        now = datetime.now(UTC)
        with self._lock:
            expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
