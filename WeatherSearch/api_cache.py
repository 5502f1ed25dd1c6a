"""Time-bounded key/value cache for API responses."""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

DEFAULT_CACHE_DURATION_MINUTES = 10


@dataclass
class CacheEntry:
    data: Any
    timestamp: float


class TimeBoundedCache:
    """
    Key/value store where every entry expires a fixed time after it was set.

    Expired entries are dropped when they are looked up; there is no
    background sweep and no size limit.
    """

    def __init__(
        self,
        duration_minutes: float = DEFAULT_CACHE_DURATION_MINUTES,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            duration_minutes: How long an entry stays valid
            clock: Returns the current time in seconds (injectable for tests)
        """
        self.duration_seconds = duration_minutes * 60
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        age = self._clock() - entry.timestamp
        if age >= self.duration_seconds:
            logging.debug(f"Cache entry '{key}' expired (age: {age:.1f}s)")
            del self._entries[key]
            return None
        return entry.data

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = CacheEntry(data=data, timestamp=self._clock())

    def clear(self) -> None:
        logging.debug(f"Clearing {len(self._entries)} cache entries")
        self._entries.clear()

    def keys_matching(self, prefix: str) -> List[str]:
        """Return the keys starting with prefix, including not-yet-purged expired ones."""
        return [key for key in self._entries if key.startswith(prefix)]

    def __len__(self) -> int:
        return len(self._entries)
