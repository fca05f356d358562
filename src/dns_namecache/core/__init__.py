"""
Name Cache Core Module

Resolution facade, caching exclusions, address classification and the live
resolution primitives.
"""

from .classifier import AddressClassifier, has_local_prefix, interface_addresses
from .exclusion import NoCachingRegistry
from .facade import ResolutionFacade
from .resolver import (
    DnspythonResolver,
    IPAddress,
    Resolution,
    SystemResolver,
    create_resolver,
)

__all__ = [
    "ResolutionFacade",
    "NoCachingRegistry",
    "AddressClassifier",
    "has_local_prefix",
    "interface_addresses",
    # Resolvers
    "Resolution",
    "IPAddress",
    "SystemResolver",
    "DnspythonResolver",
    "create_resolver",
]
