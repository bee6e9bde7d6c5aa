import logging
import time
from typing import Callable, Dict, Generic, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 60.0


class TTLCache(Generic[T]):
    """Holds one snapshot that expires ``ttl_seconds`` after it was set.

    ``set`` replaces the whole value, so readers never see a partial update.
    There is no locking: two callers that miss at the same time will both
    reload, which is harmless because loads are idempotent.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._data: Optional[T] = None
        self._timestamp: Optional[float] = None

    def get(self) -> Optional[T]:
        if self._timestamp is None:
            return None
        if self._clock() - self._timestamp >= self.ttl_seconds:
            return None
        return self._data

    def set(self, value: T) -> None:
        self._data = value
        self._timestamp = self._clock()

    def invalidate(self) -> None:
        self._data = None
        self._timestamp = None

    def is_populated(self) -> bool:
        return self.get() is not None

    def age(self) -> Optional[float]:
        """Seconds since the last ``set``, or None when empty."""
        if self._timestamp is None:
            return None
        return self._clock() - self._timestamp


class QueryCache(Generic[T]):
    """Per-key TTL cache holding at most ``max_keys`` entries.

    Past the limit, stale keys are pruned first and then the oldest
    entries are evicted.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        max_keys: int = 512,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_keys = max_keys
        self._clock = clock
        self._entries: Dict[str, Tuple[float, T]] = {}

    def get(self, key: str) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        timestamp, value = entry
        if self._clock() - timestamp >= self.ttl_seconds:
            self._entries.pop(key, None)
            return None
        return value

    def set(self, key: str, value: T) -> None:
        now = self._clock()
        # Re-insert so dict order stays oldest first
        self._entries.pop(key, None)
        self._entries[key] = (now, value)
        if len(self._entries) > self.max_keys:
            self._prune(now)
        while len(self._entries) > self.max_keys:
            self._entries.pop(next(iter(self._entries)))

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _prune(self, now: float) -> None:
        stale_keys = [
            key
            for key, (ts, _value) in self._entries.items()
            if now - ts >= self.ttl_seconds
        ]
        for key in stale_keys:
            self._entries.pop(key, None)
        logger.debug(f"Pruned {len(stale_keys)} stale query cache entries")
