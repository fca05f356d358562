"""
Name Cache Configuration Schema

Configuration sections for the cache limits, the live resolver, caching
exclusions, host network identity and logging.
"""

from dataclasses import dataclass, field
from typing import List

from .validators import (
    validate_file_path,
    validate_ip_address,
    validate_log_level,
    validate_nameservers,
    validate_positive_float,
    validate_positive_int,
    validate_regex,
)


@dataclass
class CacheConfig:
    """Cache limits section."""

    positive_max_size: int = 3000
    negative_max_size: int = 3000
    positive_max_age: int = 24 * 60 * 60
    negative_max_age: int = 24 * 60 * 60
    cleanup_interval: int = 60

    def __post_init__(self) -> None:
        """Validate cache configuration."""
        if not validate_positive_int(self.positive_max_size):
            raise ValueError(
                f"Positive max size must be positive: {self.positive_max_size}"
            )

        if not validate_positive_int(self.negative_max_size):
            raise ValueError(
                f"Negative max size must be positive: {self.negative_max_size}"
            )

        if not validate_positive_int(self.positive_max_age):
            raise ValueError(
                f"Positive max age must be positive: {self.positive_max_age}"
            )

        if not validate_positive_int(self.negative_max_age):
            raise ValueError(
                f"Negative max age must be positive: {self.negative_max_age}"
            )

        if not validate_positive_int(self.cleanup_interval):
            raise ValueError(
                f"Cleanup interval must be positive: {self.cleanup_interval}"
            )


@dataclass
class ResolverConfig:
    """Live resolver section."""

    backend: str = "system"
    timeout: float = 5.0
    nameservers: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate resolver configuration."""
        if self.backend not in ["system", "dnspython"]:
            raise ValueError(f"Invalid resolver backend: {self.backend}")

        if not validate_positive_float(self.timeout):
            raise ValueError(f"Resolver timeout must be positive: {self.timeout}")

        if not validate_nameservers(self.nameservers):
            raise ValueError(f"Invalid nameservers: {self.nameservers}")


@dataclass
class ExclusionConfig:
    """Host names that are never stored in the positive cache."""

    patterns: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate exclusion patterns."""
        if not isinstance(self.patterns, list):
            raise ValueError(f"Exclusion patterns must be a list: {self.patterns}")

        for pattern in self.patterns:
            if not validate_regex(pattern):
                raise ValueError(f"Invalid exclusion pattern: {pattern}")


@dataclass
class NetworkConfig:
    """Host network identity section."""

    static_ip: str = ""

    def __post_init__(self) -> None:
        """Validate network configuration."""
        if self.static_ip and not validate_ip_address(self.static_ip):
            raise ValueError(f"Invalid static IP: {self.static_ip}")


@dataclass
class LoggingConfig:
    """Logging configuration section."""

    level: str = "INFO"
    format: str = "structured"
    file: str = ""
    max_size_mb: int = 100
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        if not validate_log_level(self.level):
            raise ValueError(f"Invalid log level: {self.level}")

        if self.format not in ["simple", "detailed", "structured"]:
            raise ValueError(f"Invalid log format: {self.format}")

        if self.file and not validate_file_path(self.file):
            raise ValueError(f"Invalid log file path: {self.file}")

        if not validate_positive_int(self.max_size_mb):
            raise ValueError(f"Max size MB must be positive: {self.max_size_mb}")

        if not validate_positive_int(self.backup_count):
            raise ValueError(f"Backup count must be positive: {self.backup_count}")


@dataclass
class NameCacheConfig:
    """Main name cache configuration."""

    cache: CacheConfig = field(default_factory=CacheConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    exclusion: ExclusionConfig = field(default_factory=ExclusionConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def create_default_config() -> NameCacheConfig:
    """Create a default configuration instance."""
    return NameCacheConfig()
