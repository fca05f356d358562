"""
DNS Name Cache

Process-local hostname resolution cache with positive and negative sides,
caching exclusions and local address classification.
"""

from .cache import NegativeCache, PositiveCache, ScoreIndex
from .core import AddressClassifier, NoCachingRegistry, ResolutionFacade, Resolution
from .errors import (
    EmptyIndex,
    InvalidHost,
    KnownUnresolvable,
    NameCacheError,
    NotInCache,
    Unresolvable,
)
from .service import NameCacheService, get_service, set_service

__version__ = "0.1.0"

__all__ = [
    "NameCacheService",
    "get_service",
    "set_service",
    "ResolutionFacade",
    "AddressClassifier",
    "NoCachingRegistry",
    "Resolution",
    "PositiveCache",
    "NegativeCache",
    "ScoreIndex",
    # Errors
    "NameCacheError",
    "InvalidHost",
    "NotInCache",
    "KnownUnresolvable",
    "Unresolvable",
    "EmptyIndex",
]
