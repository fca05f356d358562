"""
Name Cache Storage

Positive and negative host name caches with size and age bounded eviction.
"""

from .clock import ProcessClock, get_process_clock
from .engine import (
    DEFAULT_MAX_AGE,
    DEFAULT_MAX_SIZE,
    AgedCache,
    NegativeCache,
    PositiveCache,
)
from .score_index import ScoreIndex
from .stats import CacheStats, CacheStatsManager

__all__ = [
    # Cache sides
    "AgedCache",
    "PositiveCache",
    "NegativeCache",
    "DEFAULT_MAX_SIZE",
    "DEFAULT_MAX_AGE",
    # Age ordering
    "ScoreIndex",
    "ProcessClock",
    "get_process_clock",
    # Statistics
    "CacheStats",
    "CacheStatsManager",
]
