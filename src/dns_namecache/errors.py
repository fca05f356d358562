"""
Name Cache Errors

Exception hierarchy raised by the resolution cache.
"""

from typing import Optional


class NameCacheError(Exception):
    """Base class for all name cache errors"""


class InvalidHost(NameCacheError, ValueError):
    """Empty or blank host name given to a lookup"""

    def __init__(self, host: Optional[str] = None):
        self.host = host
        super().__init__(f"Invalid host name: {host!r}")


class NotInCache(NameCacheError, LookupError):
    """Cache-only lookup found neither a positive nor a negative entry"""

    def __init__(self, host: str):
        self.host = host
        super().__init__(f"Host not in cache: {host}")


class KnownUnresolvable(NameCacheError):
    """Host is recorded in the negative cache"""

    def __init__(self, host: str):
        self.host = host
        super().__init__(f"Host is known to be unresolvable: {host}")


class Unresolvable(NameCacheError):
    """Raised by a resolution primitive when a name cannot be resolved"""

    def __init__(self, host: str, reason: str = ""):
        self.host = host
        self.reason = reason
        message = f"Unable to resolve host: {host}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class EmptyIndex(NameCacheError, LookupError):
    """Minimum requested from an empty score index"""
