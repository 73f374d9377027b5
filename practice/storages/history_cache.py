import time
from typing import Any, Dict, List


class PracticeHistoryCache:
    def __init__(self, ttl_seconds: float = 300.0):
        self._ttl = ttl_seconds
        self._entries: List[Dict[str, Any]] | None = None
        self._stored_at: float = 0.0

    def get(self) -> List[Dict[str, Any]] | None:
        if self._entries is None:
            return None
        if time.monotonic() - self._stored_at > self._ttl:
            self._entries = None
            return None
        return self._entries

    def set(self, entries: List[Dict[str, Any]]) -> None:
        self._entries = entries
        self._stored_at = time.monotonic()

    def invalidate(self) -> None:
        self._entries = None
