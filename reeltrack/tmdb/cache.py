import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

MAX_ENTRIES = 1024


class ResponseCache:
    """In-process cache of normalized gateway responses with per-entry TTL.

    Expired entries are dropped on every write, and the oldest entries are
    evicted once `max_entries` is reached.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, max_entries: int = MAX_ENTRIES):
        self._clock = clock
        self._max_entries = max_entries
        # insertion ordered, oldest first
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}

    def _is_expired(self, expires_at: float) -> bool:
        return self._clock() >= expires_at

    def _purge_expired(self) -> None:
        now = self._clock()
        for key in [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]:
            del self._entries[key]

    def get(self, key: Hashable) -> Optional[Any]:
        hit = self._entries.get(key)
        if hit is None:
            return None
        expires_at, value = hit
        if self._is_expired(expires_at):
            del self._entries[key]
            return None
        return value

    def set(self, key: Hashable, value: Any, ttl: float) -> None:
        if ttl <= 0 or self._max_entries <= 0:
            return
        self._purge_expired()
        self._entries.pop(key, None)
        while len(self._entries) >= self._max_entries:
            del self._entries[next(iter(self._entries))]
        self._entries[key] = (self._clock() + ttl, value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
