"""Name cache configuration."""

from .loader import ConfigLoader
from .schema import (
    CacheConfig,
    ExclusionConfig,
    LoggingConfig,
    NameCacheConfig,
    NetworkConfig,
    ResolverConfig,
    create_default_config,
)

__all__ = [
    "ConfigLoader",
    "NameCacheConfig",
    "CacheConfig",
    "ResolverConfig",
    "ExclusionConfig",
    "NetworkConfig",
    "LoggingConfig",
    "create_default_config",
]
