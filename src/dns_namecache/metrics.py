"""
Prometheus Metrics

Exposes the name cache counters in the Prometheus text format.
"""

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

EVICTION_REASONS = ("size", "age", "manual")


class NameCacheCollector:
    """Collects gauges and counters from a NameCacheService on each scrape"""

    def __init__(self, service):
        self.service = service

    def collect(self):
        stats = self.service.get_stats()

        yield GaugeMetricFamily(
            "namecache_positive_entries",
            "Entries in the positive name cache",
            value=stats["positive_cache_size"],
        )
        yield GaugeMetricFamily(
            "namecache_negative_entries",
            "Entries in the negative name cache",
            value=stats["negative_cache_size"],
        )
        yield GaugeMetricFamily(
            "namecache_excluded_hosts",
            "Host names excluded from positive caching",
            value=stats["excluded_host_count"],
        )

        hits = CounterMetricFamily(
            "namecache_hits", "Cache lookups answered", labels=["side"]
        )
        misses = CounterMetricFamily(
            "namecache_misses", "Cache lookups not answered", labels=["side"]
        )
        evictions = CounterMetricFamily(
            "namecache_evictions", "Evicted cache entries", labels=["side", "reason"]
        )
        for side in ("positive", "negative"):
            side_stats = stats[side]
            hits.add_metric([side], side_stats["cache_hits"])
            misses.add_metric([side], side_stats["cache_misses"])
            for reason in EVICTION_REASONS:
                evictions.add_metric([side, reason], side_stats[f"{reason}_evictions"])
        yield hits
        yield misses
        yield evictions

        yield CounterMetricFamily(
            "namecache_live_lookups",
            "Lookups sent to the live resolver",
            value=stats["live_lookups"],
        )
        yield CounterMetricFamily(
            "namecache_live_failures",
            "Live lookups that failed to resolve",
            value=stats["live_failures"],
        )


def create_registry(service) -> CollectorRegistry:
    registry = CollectorRegistry()
    registry.register(NameCacheCollector(service))
    return registry


def render_metrics(service) -> str:
    """Render the service metrics in the Prometheus text exposition format"""
    return generate_latest(create_registry(service)).decode("utf-8")
