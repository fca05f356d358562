"""
Name Cache Statistics

Per-side counters for cache lookups, insertions and evictions.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Dict


@dataclass
class CacheStats:
    """Cache statistics data structure"""

    # Lookup Statistics
    total_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0

    # Size Statistics
    inserts: int = 0
    current_entries: int = 0
    max_entries_reached: int = 0

    # Eviction Statistics
    total_evictions: int = 0
    size_evictions: int = 0
    age_evictions: int = 0
    manual_evictions: int = 0
    invariant_violations: int = 0

    start_time: float = field(default_factory=time.time)

    def hit_ratio(self) -> float:
        """Calculate cache hit ratio"""
        if self.total_requests == 0:
            return 0.0
        return self.cache_hits / self.total_requests

    def uptime_seconds(self) -> float:
        return time.time() - self.start_time


class CacheStatsManager:
    """Thread-safe manager for one cache side's statistics"""

    def __init__(self) -> None:
        self.stats = CacheStats()
        self._lock = threading.Lock()

    def record_hit(self) -> None:
        with self._lock:
            self.stats.total_requests += 1
            self.stats.cache_hits += 1

    def record_miss(self) -> None:
        with self._lock:
            self.stats.total_requests += 1
            self.stats.cache_misses += 1

    def record_insert(self, entries: int) -> None:
        with self._lock:
            self.stats.inserts += 1
            self._update_size(entries)

    def record_eviction(self, eviction_type: str, entries: int) -> None:
        """Record cache eviction of type "size", "age" or "manual" """
        with self._lock:
            self.stats.total_evictions += 1

            if eviction_type == "size":
                self.stats.size_evictions += 1
            elif eviction_type == "age":
                self.stats.age_evictions += 1
            elif eviction_type == "manual":
                self.stats.manual_evictions += 1

            self._update_size(entries)

    def record_invariant_violation(self) -> None:
        with self._lock:
            self.stats.invariant_violations += 1

    def update_cache_size(self, entries: int) -> None:
        with self._lock:
            self._update_size(entries)

    def _update_size(self, entries: int) -> None:
        self.stats.current_entries = entries
        if entries > self.stats.max_entries_reached:
            self.stats.max_entries_reached = entries

    def get_stats(self) -> Dict:
        """Get cache statistics as a plain dictionary"""
        with self._lock:
            return {
                "hit_ratio": round(self.stats.hit_ratio(), 4),
                "total_requests": self.stats.total_requests,
                "cache_hits": self.stats.cache_hits,
                "cache_misses": self.stats.cache_misses,
                "inserts": self.stats.inserts,
                "current_entries": self.stats.current_entries,
                "max_entries_reached": self.stats.max_entries_reached,
                "total_evictions": self.stats.total_evictions,
                "size_evictions": self.stats.size_evictions,
                "age_evictions": self.stats.age_evictions,
                "manual_evictions": self.stats.manual_evictions,
                "invariant_violations": self.stats.invariant_violations,
                "uptime_seconds": round(self.stats.uptime_seconds(), 2),
            }
