"""
Response Cache

In-process memoization of API responses keyed by the full request URL.
Bounded (LRU eviction) with an optional time-to-live per entry.
"""

import copy
import time
from collections import OrderedDict
from typing import Any, Callable, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class ResponseCache:
    """Bounded LRU cache with optional expiry"""

    def __init__(
        self,
        max_entries: int = 256,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            max_entries: Maximum number of cached responses (0 disables caching)
            ttl_seconds: Seconds an entry stays valid (None = until evicted)
            clock: Monotonic time source
        """
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def enabled(self) -> bool:
        return self.max_entries > 0

    def get(self, key: str) -> Optional[Any]:
        """Return a copy of the cached value, or None if missing or expired"""
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None

        stored_at, value = entry
        if self.ttl_seconds is not None and self._clock() - stored_at > self.ttl_seconds:
            del self._entries[key]
            self.misses += 1
            return None

        self._entries.move_to_end(key)
        self.hits += 1
        return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        if not self.enabled:
            return

        self._entries[key] = (self._clock(), copy.deepcopy(value))
        self._entries.move_to_end(key)

        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            logger.debug(f"Cache full ({self.max_entries}), evicted oldest entry")

    def clear(self) -> None:
        self._entries.clear()
