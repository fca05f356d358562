"""
Name Cache Service

Builds the resolution cache subsystem from configuration and owns its
lifecycle: explicit construction, a periodic maintenance task and shutdown.
"""

import asyncio
import logging
from typing import Dict, Optional

from .cache.clock import ProcessClock, get_process_clock
from .cache.engine import NegativeCache, PositiveCache
from .config.loader import ConfigLoader
from .config.schema import NameCacheConfig, create_default_config
from .core.classifier import AddressClassifier
from .core.exclusion import NoCachingRegistry
from .core.facade import ResolutionFacade
from .core.resolver import create_resolver

logger = logging.getLogger(__name__)


class NameCacheService:
    """Resolution facade, address classifier and their maintenance task"""

    def __init__(
        self,
        config: Optional[NameCacheConfig] = None,
        resolver=None,
        clock: Optional[ProcessClock] = None,
        classifier: Optional[AddressClassifier] = None,
    ):
        """
        Initialize the service

        Args:
            config: Name cache configuration, defaults when omitted
            resolver: Live resolver, built from ``config.resolver`` when omitted
            clock: Time base shared by both cache sides
            classifier: Prebuilt classifier, built around the facade when omitted
        """
        self.config = config or create_default_config()
        self.clock = clock or get_process_clock()

        cache_config = self.config.cache
        self._owns_resolver = resolver is None
        self.facade = ResolutionFacade(
            resolver=resolver or create_resolver(self.config.resolver),
            positive=PositiveCache(
                max_size=cache_config.positive_max_size,
                max_age=cache_config.positive_max_age,
                clock=self.clock,
            ),
            negative=NegativeCache(
                max_size=cache_config.negative_max_size,
                max_age=cache_config.negative_max_age,
                clock=self.clock,
            ),
            no_caching=NoCachingRegistry(self.config.exclusion.patterns),
        )
        self.classifier = classifier or AddressClassifier(
            self.facade, static_ip=self.config.network.static_ip
        )

        self._cleanup_task: Optional[asyncio.Task] = None
        self._cleanup_interval = cache_config.cleanup_interval
        self._config_loader: Optional[ConfigLoader] = None

    @classmethod
    def from_config_file(
        cls, config_file: Optional[str], hot_reload: bool = False, **kwargs
    ) -> "NameCacheService":
        """Build a service from a configuration file

        With hot_reload, changes to the file are applied to the running
        service once it has been started.
        """
        loader = ConfigLoader(config_file, enable_hot_reload=hot_reload)
        service = cls(loader.load_config(), **kwargs)
        service.watch_config(loader)
        return service

    def watch_config(self, loader: ConfigLoader) -> None:
        """Apply configurations reloaded by loader to this service"""
        loader.reload_callback = self.apply_config
        self._config_loader = loader

    def apply_config(self, config: NameCacheConfig) -> None:
        """Take over limits, exclusion patterns and network settings

        Exclusion patterns can only be added at runtime; patterns removed
        from the configuration stay active until restart.
        """
        cache_config = config.cache
        evicted_positive = self.facade.positive.set_limits(
            cache_config.positive_max_size, cache_config.positive_max_age
        )
        evicted_negative = self.facade.negative.set_limits(
            cache_config.negative_max_size, cache_config.negative_max_age
        )
        self._cleanup_interval = cache_config.cleanup_interval

        active = set(self.facade.no_caching.patterns)
        for pattern in config.exclusion.patterns:
            if pattern not in active:
                self.facade.add_no_caching_pattern(pattern)
        dropped = active - set(config.exclusion.patterns)
        if dropped:
            logger.warning(
                f"Removed no-caching patterns stay active until restart: {sorted(dropped)}"
            )

        if self._owns_resolver and config.resolver != self.config.resolver:
            self.facade.resolver = create_resolver(config.resolver)

        self.classifier.static_ip = config.network.static_ip
        self.config = config
        logger.info(
            f"Applied configuration, evicted {evicted_positive} positive "
            f"and {evicted_negative} negative entries"
        )

    @property
    def is_running(self) -> bool:
        return self._cleanup_task is not None and not self._cleanup_task.done()

    async def start(self) -> None:
        """Start the background cache maintenance task"""
        if self.is_running:
            return
        self._cleanup_task = asyncio.create_task(self._periodic_cleanup())
        if self._config_loader:
            self._config_loader.start_hot_reload()
        logger.info(
            f"Name cache service started, flushing every {self._cleanup_interval}s"
        )

    async def _periodic_cleanup(self) -> None:
        while True:
            try:
                await asyncio.sleep(self._cleanup_interval)
                evicted = self.facade.flush()
                if evicted["positive"] or evicted["negative"]:
                    logger.debug(f"Periodic flush evicted {evicted}")
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in name cache cleanup: {e}", exc_info=True)

    async def shutdown(self) -> None:
        """Stop maintenance and drop all cached state"""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None

        if self._config_loader:
            self._config_loader.stop_hot_reload()

        positive = self.facade.positive.clear()
        negative = self.facade.negative.clear()
        logger.info(
            f"Name cache service shutdown complete, dropped {positive} positive "
            f"and {negative} negative entries"
        )

    async def resolve(self, host: str):
        return await self.facade.resolve(host)

    def resolve_cached_only(self, host: str):
        return self.facade.resolve_cached_only(host)

    async def is_local(self, address: str) -> bool:
        return await self.classifier.is_local(address)

    async def my_public_local_address(self):
        return await self.classifier.my_public_local_address()

    def get_stats(self) -> Dict:
        stats = self.facade.get_stats()
        stats["running"] = self.is_running
        stats["cleanup_interval"] = self._cleanup_interval
        return stats

    async def health_check(self) -> Dict:
        """Report service status for dashboards"""
        return {
            "status": "healthy" if self.is_running else "stopped",
            "positive_cache_size": self.facade.positive_cache_size(),
            "negative_cache_size": self.facade.negative_cache_size(),
            "excluded_host_count": self.facade.excluded_host_count(),
        }


_service: Optional[NameCacheService] = None


def set_service(service: Optional[NameCacheService]) -> None:
    """Register the process-wide service handle"""
    global _service
    _service = service


def get_service() -> NameCacheService:
    """Get the process-wide service handle

    Raises:
        RuntimeError: If no service has been registered
    """
    if _service is None:
        raise RuntimeError("Name cache service not set. Call set_service() first.")
    return _service
