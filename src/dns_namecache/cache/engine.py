"""
Name Cache Engine

Positive and negative host name caches bounded by entry count and by age.

Each side keeps its entries in a dictionary and their insertion ages in a
ScoreIndex. One lock per side covers both structures, so the
"check limits, evict, insert" sequence of ``put`` is atomic. Ages are set at
insertion only; a cache hit does not extend an entry's life.
"""

import logging
import threading
from typing import Any, Dict, Hashable, List, Optional

from .clock import ProcessClock, get_process_clock
from .score_index import ScoreIndex
from .stats import CacheStatsManager

DEFAULT_MAX_SIZE = 3000
DEFAULT_MAX_AGE = 24 * 60 * 60

logger = logging.getLogger(__name__)


class AgedCache:
    """Dictionary bounded by size and insertion age"""

    name = "aged"

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        max_age: int = DEFAULT_MAX_AGE,
        clock: Optional[ProcessClock] = None,
    ):
        """
        Initialize cache side

        Args:
            max_size: Maximum number of entries kept after a flush
            max_age: Maximum entry age in seconds
            clock: Time base for entry ages, the process clock by default
        """
        self.max_size = max_size
        self.max_age = max_age
        self.clock = clock or get_process_clock()

        self._entries: Dict[Hashable, Any] = {}
        self._ages = ScoreIndex()
        self._lock = threading.Lock()

        self.stats = CacheStatsManager()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def size(self) -> int:
        return len(self._entries)

    def keys(self) -> List[Hashable]:
        with self._lock:
            return list(self._entries)

    def get(self, key: Hashable) -> Optional[Any]:
        """Look up key without refreshing its age"""
        with self._lock:
            value = self._entries.get(key)

        if value is None:
            self.stats.record_miss()
        else:
            self.stats.record_hit()
        return value

    def put(self, key: Hashable, value: Any) -> None:
        """Store value under key, evicting old entries first"""
        with self._lock:
            if key in self._entries:
                self._flush_locked()
            else:
                # leave room for the new key
                self._flush_locked(self.max_size - 1)
            self._entries[key] = value
            self._ages.set_score(key, self.clock.now())
            size = len(self._entries)

        self.stats.record_insert(size)

    def remove(self, key: Hashable) -> bool:
        """Remove key from the cache; returns whether it was present"""
        with self._lock:
            found = self._entries.pop(key, None) is not None
            self._ages.delete_score(key)
            size = len(self._entries)

        if found:
            self.stats.record_eviction("manual", size)
        return found

    def flush(self) -> int:
        """Evict entries beyond the size limit or older than the age limit"""
        with self._lock:
            return self._flush_locked()

    def set_limits(self, max_size: int, max_age: int) -> int:
        """Change the bounds and evict what no longer fits"""
        with self._lock:
            self.max_size = max_size
            self.max_age = max_age
            return self._flush_locked()

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._ages.clear()

        self.stats.update_cache_size(0)
        return count

    def _flush_locked(self, size_limit: Optional[int] = None) -> int:
        if size_limit is None:
            size_limit = self.max_size
        cutoff = self.clock.now() - self.max_age
        evicted = 0

        while self._ages.size() > 0:
            if self._ages.size() > size_limit:
                eviction_type = "size"
            elif self._ages.get_min_score() < cutoff:
                eviction_type = "age"
            else:
                break

            key = self._ages.get_min_object()
            found = self._entries.pop(key, None) is not None
            self._ages.delete_score(key)

            if not found:
                # index referenced a key the map does not hold
                self.stats.record_invariant_violation()
                logger.warning(
                    f"{self.name} cache index out of sync with entries, "
                    f"dropped key {key!r} and stopped eviction"
                )
                break

            evicted += 1
            self.stats.record_eviction(eviction_type, len(self._entries))

        if evicted:
            logger.debug(f"Evicted {evicted} {self.name} cache entries")

        return evicted

    def get_cache_info(self) -> Dict:
        """Get cache statistics together with its limits"""
        info = self.stats.get_stats()
        info.update(
            {
                "name": self.name,
                "entries": len(self._entries),
                "max_size": self.max_size,
                "max_age": self.max_age,
            }
        )
        return info


class PositiveCache(AgedCache):
    """Lowercase host name -> resolved address"""

    name = "positive"


class NegativeCache(AgedCache):
    """Lowercase host names known to fail resolution"""

    name = "negative"

    MARKER = True

    def put(self, key: Hashable, value: Any = MARKER) -> None:
        super().put(key, value)

    def is_known(self, key: Hashable) -> bool:
        """Membership test that is counted as a lookup"""
        return self.get(key) is not None
