"""Tests for the live resolution primitives."""

import asyncio
import ipaddress
import socket

import pytest

from dns_namecache.config.schema import ResolverConfig
from dns_namecache.core.resolver import (
    DnspythonResolver,
    SystemResolver,
    canonical_name,
    create_resolver,
    parse_address,
)
from dns_namecache.errors import Unresolvable


def test_parse_address_strips_zone():
    assert parse_address("fe80::1%eth0") == ipaddress.ip_address("fe80::1")
    assert parse_address("192.0.2.1") == ipaddress.ip_address("192.0.2.1")


def test_canonical_name():
    assert canonical_name("WWW.Example.COM.", "x") == "www.example.com"
    assert canonical_name(None, "Fallback.org") == "fallback.org"
    assert canonical_name("", "host") == "host"


def test_create_resolver():
    assert isinstance(create_resolver(ResolverConfig()), SystemResolver)
    resolver = create_resolver(
        ResolverConfig(backend="dnspython", timeout=1.5, nameservers=["192.0.2.53"])
    )
    assert isinstance(resolver, DnspythonResolver)
    assert resolver.timeout == 1.5


class TestSystemResolver:
    """Test getaddrinfo based resolution"""

    @pytest.mark.asyncio
    async def test_canonical_name_from_getaddrinfo(self, monkeypatch):
        async def fake_getaddrinfo(host, port, **kwargs):
            assert kwargs["flags"] == socket.AI_CANONNAME
            return [
                (socket.AF_INET, socket.SOCK_STREAM, 6, "Edge.Example.NET", ("192.0.2.10", 0)),
                (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("192.0.2.11", 0)),
            ]

        monkeypatch.setattr(asyncio.get_running_loop(), "getaddrinfo", fake_getaddrinfo)
        result = await SystemResolver().resolve("www.example.net")

        assert result.name == "edge.example.net"
        assert result.address == ipaddress.ip_address("192.0.2.10")

    @pytest.mark.asyncio
    async def test_gaierror_is_unresolvable(self, monkeypatch):
        async def fake_getaddrinfo(host, port, **kwargs):
            raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

        monkeypatch.setattr(asyncio.get_running_loop(), "getaddrinfo", fake_getaddrinfo)

        with pytest.raises(Unresolvable) as excinfo:
            await SystemResolver().resolve("nowhere.invalid")
        assert excinfo.value.host == "nowhere.invalid"

    @pytest.mark.asyncio
    async def test_timeout_is_unresolvable(self, monkeypatch):
        async def slow_getaddrinfo(host, port, **kwargs):
            await asyncio.sleep(10)

        monkeypatch.setattr(asyncio.get_running_loop(), "getaddrinfo", slow_getaddrinfo)

        with pytest.raises(Unresolvable, match="timeout"):
            await SystemResolver(timeout=0.01).resolve("slow.example")

    @pytest.mark.asyncio
    async def test_numeric_host(self):
        result = await SystemResolver().resolve("127.0.0.1")

        assert result.address == ipaddress.ip_address("127.0.0.1")


class TestDnspythonResolver:
    """Test the dnspython backend without network access"""

    @pytest.mark.asyncio
    async def test_literal_address(self):
        resolver = DnspythonResolver(nameservers=["192.0.2.53"])
        result = await resolver.resolve("198.51.100.4")

        assert result.name == "198.51.100.4"
        assert result.address == ipaddress.ip_address("198.51.100.4")

    @pytest.mark.asyncio
    async def test_nxdomain(self, monkeypatch):
        import dns.resolver

        resolver = DnspythonResolver(nameservers=["192.0.2.53"])

        async def fake_resolve(host, rdtype):
            raise dns.resolver.NXDOMAIN()

        monkeypatch.setattr(resolver._resolver, "resolve", fake_resolve)

        with pytest.raises(Unresolvable, match="NXDOMAIN"):
            await resolver.resolve("nowhere.invalid")

    @pytest.mark.asyncio
    async def test_no_answer_on_all_types(self, monkeypatch):
        import dns.resolver

        resolver = DnspythonResolver(nameservers=["192.0.2.53"])
        queried = []

        async def fake_resolve(host, rdtype):
            queried.append(rdtype)
            raise dns.resolver.NoAnswer()

        monkeypatch.setattr(resolver._resolver, "resolve", fake_resolve)

        with pytest.raises(Unresolvable):
            await resolver.resolve("empty.example")
        assert queried == ["A", "AAAA"]
