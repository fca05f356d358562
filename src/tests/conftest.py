"""Shared fixtures for the name cache tests."""

import ipaddress
from typing import Dict, List, Optional

import pytest

from dns_namecache.cache.clock import ProcessClock
from dns_namecache.cache.engine import NegativeCache, PositiveCache
from dns_namecache.core.exclusion import NoCachingRegistry
from dns_namecache.core.facade import ResolutionFacade
from dns_namecache.core.resolver import Resolution
from dns_namecache.errors import Unresolvable


class FakeClock(ProcessClock):
    """Clock that only moves when a test advances it"""

    def __init__(self, start: float = 0.0):
        self.current = start
        super().__init__(epoch=0.0, time_source=lambda: self.current)

    def advance(self, seconds: float) -> None:
        self.current += seconds


class FakeResolver:
    """In-memory resolver that records every lookup"""

    def __init__(
        self,
        records: Optional[Dict[str, str]] = None,
        aliases: Optional[Dict[str, str]] = None,
    ):
        self.records = dict(records or {})
        self.aliases = dict(aliases or {})
        self.calls: List[str] = []

    async def resolve(self, host: str) -> Resolution:
        self.calls.append(host)
        name = self.aliases.get(host, host)
        if name not in self.records:
            raise Unresolvable(host, "NXDOMAIN")
        return Resolution(name=name, address=ipaddress.ip_address(self.records[name]))

    async def reverse_lookup(self, address: str) -> str:
        for name, value in self.records.items():
            if value == address:
                return name
        raise Unresolvable(address, "no PTR record")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def resolver():
    return FakeResolver(
        records={
            "example.com": "93.184.216.34",
            "www.example.org": "93.184.216.35",
            "intranet.corp.local": "10.0.0.5",
            "loopy.test": "127.0.0.2",
        },
        aliases={"alias.example.org": "www.example.org"},
    )


@pytest.fixture
def facade(resolver, clock):
    return ResolutionFacade(
        resolver=resolver,
        positive=PositiveCache(max_size=10, max_age=3600, clock=clock),
        negative=NegativeCache(max_size=10, max_age=3600, clock=clock),
        no_caching=NoCachingRegistry([r".*\.corp\.local"]),
    )
