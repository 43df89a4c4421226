"""
In-memory translation cache.

Entries expire lazily when read after their TTL, and the oldest inserted
entry is evicted once the store grows past its capacity.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional

from transintel.config import CacheDefaults

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload and the clock reading at which it was stored."""
    payload: Any
    stored_at: float


class TranslationCache:
    """
    Bounded, TTL-aware key-value store keyed by request fingerprint.

    All operations take an internal lock, so concurrent request handlers
    see either the old or the new entry for a key, and insertion plus
    eviction happen as one step.
    """

    def __init__(
        self,
        max_size: int = CacheDefaults.MAX_SIZE,
        ttl_seconds: float = CacheDefaults.TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of entries kept
            ttl_seconds: Lifetime of an entry
            clock: Monotonic time source, injectable for tests
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached payload, or None on a miss or an expired entry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return entry.payload

    def set(self, key: Hashable, payload: Any) -> None:
        """Store a payload and prune the store back to capacity."""
        with self._lock:
            # Re-inserting moves the key to the newest position.
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(payload=payload, stored_at=self._clock())
            self._prune_locked()

    def prune(self) -> int:
        """Evict oldest entries until the store is within capacity."""
        with self._lock:
            return self._prune_locked()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def _prune_locked(self) -> int:
        evicted = 0
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
            evicted += 1
        if evicted:
            logger.debug(f"Evicted {evicted} oldest cache entries")
        return evicted
