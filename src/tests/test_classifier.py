"""Tests for the address classifier."""

import ipaddress

import pytest

from dns_namecache.core.classifier import AddressClassifier, has_local_prefix
from dns_namecache.errors import Unresolvable


def ip(text):
    return ipaddress.ip_address(text)


def make_classifier(facade, addresses=None, default=None, **kwargs):
    async def lister():
        if addresses is None:
            raise Unresolvable("myhost", "not found")
        return [ip(a) for a in addresses]

    async def default_address():
        if default is None:
            raise Unresolvable("myhost", "not found")
        return ip(default)

    return AddressClassifier(
        facade,
        local_addresses=kwargs.pop("local_addresses", []),
        address_lister=lister,
        default_address=default_address,
        **kwargs,
    )


class TestLocalPrefix:
    """Test the textual prefix checks"""

    @pytest.mark.parametrize(
        "address",
        [
            "localhost",
            "127.0.0.1",
            "10.1.2.3",
            "192.168.0.5",
            "169.254.10.1",
            "172.16.0.1",
            "172.24.9.9",
            "172.31.255.255",
        ],
    )
    def test_local(self, address):
        assert has_local_prefix(address) is True

    @pytest.mark.parametrize(
        "address", ["172.32.0.1", "172.15.0.1", "8.8.8.8", "172.1.0.1", "193.168.0.1"]
    )
    def test_not_local(self, address):
        assert has_local_prefix(address) is False


class TestIsLocal:
    """Test classification with resolution fallback"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "address", ["127.0.0.1", "10.1.2.3", "192.168.0.5", "172.16.0.1"]
    )
    async def test_private_ranges(self, facade, resolver, address):
        classifier = make_classifier(facade)

        assert await classifier.is_local(address) is True
        assert resolver.calls == []

    @pytest.mark.asyncio
    async def test_public_boundary(self, facade, resolver):
        """172.32 lies outside the reserved second-octet range"""
        resolver.records["172.32.0.1"] = "172.32.0.1"
        classifier = make_classifier(facade)

        assert await classifier.is_local("172.32.0.1") is False

    @pytest.mark.asyncio
    async def test_hostname_resolving_to_loopback(self, facade):
        classifier = make_classifier(facade)

        assert await classifier.is_local("loopy.test") is True

    @pytest.mark.asyncio
    async def test_hostname_resolving_to_own_interface(self, facade):
        classifier = make_classifier(
            facade, local_addresses=[ip("93.184.216.34")]
        )

        assert await classifier.is_local("example.com") is True
        assert await classifier.is_local("www.example.org") is False

    @pytest.mark.asyncio
    async def test_unresolvable_is_not_local(self, facade):
        classifier = make_classifier(facade)

        assert await classifier.is_local("nowhere.invalid") is False
        assert await classifier.is_local("") is False

    @pytest.mark.asyncio
    async def test_unspecified_address(self, facade, resolver):
        resolver.records["anyhost.test"] = "0.0.0.0"
        classifier = make_classifier(facade)

        assert await classifier.is_local("anyhost.test") is True


class TestMyPublicLocalAddress:
    """Test selection of the public-looking local address"""

    @pytest.mark.asyncio
    async def test_single_address(self, facade):
        classifier = make_classifier(facade, addresses=["10.0.0.1"])

        assert await classifier.my_public_local_address() == ip("10.0.0.1")

    @pytest.mark.asyncio
    async def test_prefers_public_address(self, facade):
        classifier = make_classifier(
            facade,
            addresses=[
                "127.0.1.1",
                "10.0.0.1",
                "172.20.0.1",
                "192.168.1.20",
                "2001:db8::1",
                "203.0.113.9",
            ],
        )

        assert await classifier.my_public_local_address() == ip("203.0.113.9")

    @pytest.mark.asyncio
    async def test_class_b_boundary_counts_as_public(self, facade):
        classifier = make_classifier(facade, addresses=["127.0.0.1", "172.32.1.1"])

        assert await classifier.my_public_local_address() == ip("172.32.1.1")

    @pytest.mark.asyncio
    async def test_relaxes_to_private_non_loopback(self, facade):
        classifier = make_classifier(
            facade, addresses=["127.0.1.1", "fe80::1", "192.168.1.20"]
        )

        assert await classifier.my_public_local_address() == ip("192.168.1.20")

    @pytest.mark.asyncio
    async def test_relaxes_to_loopback_ipv4(self, facade):
        classifier = make_classifier(facade, addresses=["::1", "127.0.1.1"])

        assert await classifier.my_public_local_address() == ip("127.0.1.1")

    @pytest.mark.asyncio
    async def test_only_ipv6(self, facade):
        classifier = make_classifier(facade, addresses=["::1", "fe80::1"])

        assert await classifier.my_public_local_address() == ip("::1")

    @pytest.mark.asyncio
    async def test_falls_back_to_default_address(self, facade):
        classifier = make_classifier(facade, addresses=[], default="10.9.8.7")

        assert await classifier.my_public_local_address() == ip("10.9.8.7")

    @pytest.mark.asyncio
    async def test_falls_back_to_loopback(self, facade):
        classifier = make_classifier(facade, addresses=None, default=None)

        assert await classifier.my_public_local_address() == ip("127.0.0.1")

    @pytest.mark.asyncio
    async def test_static_ip_wins(self, facade):
        classifier = make_classifier(
            facade, addresses=["203.0.113.9"], static_ip="198.51.100.1"
        )

        assert await classifier.my_public_ip() == "198.51.100.1"

    @pytest.mark.asyncio
    async def test_my_public_ip_discovered(self, facade):
        classifier = make_classifier(facade, addresses=["203.0.113.9", "10.0.0.1"])

        assert await classifier.my_public_ip() == "203.0.113.9"
