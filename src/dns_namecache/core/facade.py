"""
Resolution Facade

Public entry point of the name cache: cache-only lookups and lookups that
fall back to a live resolution on a cache miss.

Lookup order is positive cache, negative cache, live resolver. Successful
results are stored under the resolved canonical name, so a host requested
through an alias is not found again under the alias. Failed lookups are
stored under the requested name.
"""

import logging
from collections import Counter
from typing import Dict, Optional

from ..cache.engine import NegativeCache, PositiveCache
from ..errors import InvalidHost, KnownUnresolvable, NotInCache, Unresolvable
from .exclusion import NoCachingRegistry
from .resolver import IPAddress, Resolution, SystemResolver

logger = logging.getLogger(__name__)


class ResolutionFacade:
    """Caching host name resolver"""

    def __init__(
        self,
        resolver=None,
        positive: Optional[PositiveCache] = None,
        negative: Optional[NegativeCache] = None,
        no_caching: Optional[NoCachingRegistry] = None,
    ):
        """
        Initialize the facade

        Args:
            resolver: Object with an async ``resolve(host)`` returning a
                Resolution or raising Unresolvable
            positive: Cache of successful resolutions
            negative: Cache of names that failed to resolve
            no_caching: Exclusion rules for the positive cache
        """
        self.resolver = resolver or SystemResolver()
        self.positive = positive if positive is not None else PositiveCache()
        self.negative = negative if negative is not None else NegativeCache()
        self.no_caching = no_caching if no_caching is not None else NoCachingRegistry()
        self._counters: Counter = Counter()

    @staticmethod
    def normalize(host: Optional[str]) -> str:
        """Trim and lowercase a host name

        Raises:
            InvalidHost: If nothing is left after trimming
        """
        if host is None:
            raise InvalidHost(host)
        key = host.strip().lower()
        if not key:
            raise InvalidHost(host)
        return key

    def resolve_cached_only(self, host: str) -> IPAddress:
        """Answer from the caches without touching the network

        Raises:
            InvalidHost: If host is empty
            KnownUnresolvable: If host is in the negative cache
            NotInCache: If neither cache knows host
        """
        key = self.normalize(host)

        address = self.positive.get(key)
        if address is not None:
            return address

        if self.negative.is_known(key):
            raise KnownUnresolvable(key)

        raise NotInCache(key)

    async def resolve(self, host: str) -> Optional[IPAddress]:
        """Resolve host, using the caches first

        Returns None when the host cannot be resolved.

        Raises:
            InvalidHost: If host is empty
        """
        key = self.normalize(host)

        address = self.positive.get(key)
        if address is not None:
            return address

        if self.negative.is_known(key):
            return None

        return await self._resolve_live(key)

    async def refresh(self, host: str) -> Optional[IPAddress]:
        """Drop any cached state for host and resolve it live"""
        key = self.normalize(host)
        self.positive.remove(key)
        self.negative.remove(key)
        return await self._resolve_live(key)

    async def reverse(self, address: str) -> str:
        """Uncached address -> name lookup through the live resolver

        Raises:
            Unresolvable: If no name is registered for the address
        """
        return await self.resolver.reverse_lookup(address)

    def invalidate(self, host: str) -> bool:
        """Remove host from both caches; returns whether anything was removed"""
        key = self.normalize(host)
        removed_positive = self.positive.remove(key)
        removed_negative = self.negative.remove(key)
        return removed_positive or removed_negative

    def is_cacheable(self, result: Resolution) -> bool:
        if result.address.is_loopback:
            return False
        return not self.no_caching.is_excluded(result.name)

    def add_no_caching_pattern(self, pattern) -> int:
        """Exclude names matching pattern and drop those already cached

        Returns:
            Number of positive entries removed

        Raises:
            re.error: If the pattern does not compile
        """
        self.no_caching.add_pattern(pattern)

        removed = 0
        for key in self.positive.keys():
            if self.no_caching.is_excluded(key) and self.positive.remove(key):
                removed += 1

        if removed:
            logger.info(f"Dropped {removed} cached hosts now excluded from caching")
        return removed

    def flush(self) -> Dict[str, int]:
        """Evict aged and surplus entries on both sides"""
        return {
            "positive": self.positive.flush(),
            "negative": self.negative.flush(),
        }

    async def _resolve_live(self, key: str) -> Optional[IPAddress]:
        self._counters["live_lookups"] += 1

        # no cache lock is held while the resolver runs
        try:
            result = await self.resolver.resolve(key)
        except Unresolvable as e:
            self._counters["live_failures"] += 1
            self.positive.remove(key)
            logger.debug(f"Caching negative result for {key}: {e}")
            self.negative.put(key)
            return None

        self.negative.remove(key)
        if result.name != key:
            self.negative.remove(result.name)

        if self.is_cacheable(result):
            self.positive.put(result.name, result.address)
        else:
            self._counters["uncacheable"] += 1
            logger.debug(f"Not caching {result.name} -> {result.address}")

        return result.address

    def positive_cache_size(self) -> int:
        return self.positive.size()

    def negative_cache_size(self) -> int:
        return self.negative.size()

    def excluded_host_count(self) -> int:
        return self.no_caching.excluded_count()

    def get_stats(self) -> Dict:
        """Get counters for dashboards"""
        return {
            "positive_cache_size": self.positive_cache_size(),
            "negative_cache_size": self.negative_cache_size(),
            "excluded_host_count": self.excluded_host_count(),
            "live_lookups": self._counters["live_lookups"],
            "live_failures": self._counters["live_failures"],
            "uncacheable": self._counters["uncacheable"],
            "positive": self.positive.get_cache_info(),
            "negative": self.negative.get_cache_info(),
        }
