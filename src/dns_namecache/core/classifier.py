"""
Address Classifier

Tells local and private network addresses apart from globally routable ones,
and picks the most public-looking address this host is known by.
"""

import asyncio
import ipaddress
import logging
import socket
from typing import Awaitable, Callable, Iterable, List, Optional, Set

import psutil

from ..errors import InvalidHost, Unresolvable
from .facade import ResolutionFacade
from .resolver import IPAddress, parse_address

logger = logging.getLogger(__name__)

LOOPBACK = ipaddress.ip_address("127.0.0.1")

# 172.16.0.0 - 172.31.255.255 is matched by its sixteen two-octet prefixes
LOCAL_PREFIXES = (
    "127.",
    "192.168.",
    "10.",
    "169.254.",
    "172.16.",
    "172.17.",
    "172.18.",
    "172.19.",
    "172.20.",
    "172.21.",
    "172.22.",
    "172.23.",
    "172.24.",
    "172.25.",
    "172.26.",
    "172.27.",
    "172.28.",
    "172.29.",
    "172.30.",
    "172.31.",
)


def has_local_prefix(address: str) -> bool:
    """Textual check for localhost, loopback, private and link-local ranges"""
    return address == "localhost" or address.startswith(LOCAL_PREFIXES)


def interface_addresses() -> Set[IPAddress]:
    """All IPv4 and IPv6 addresses bound to this host's interfaces"""
    addresses = set()
    for snics in psutil.net_if_addrs().values():
        for snic in snics:
            if snic.family not in (socket.AF_INET, socket.AF_INET6):
                continue
            try:
                addresses.add(parse_address(snic.address))
            except ValueError:
                logger.debug(f"Skipping unparsable interface address {snic.address}")
    return addresses


async def hostname_addresses() -> List[IPAddress]:
    """Addresses the local host name resolves to, in resolver order"""
    hostname = socket.gethostname() or "localhost"
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(hostname, None, type=socket.SOCK_STREAM)
    except socket.gaierror as e:
        raise Unresolvable(hostname, str(e)) from e

    addresses: List[IPAddress] = []
    for _family, _type, _proto, _canonname, sockaddr in infos:
        address = parse_address(sockaddr[0])
        if address not in addresses:
            addresses.append(address)
    return addresses


async def default_local_address() -> IPAddress:
    """The platform's primary IPv4 address for the local host name"""
    hostname = socket.gethostname() or "localhost"
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(
            hostname, None, family=socket.AF_INET, type=socket.SOCK_STREAM
        )
    except socket.gaierror as e:
        raise Unresolvable(hostname, str(e)) from e
    if not infos:
        raise Unresolvable(hostname, "no addresses")
    return parse_address(infos[0][4][0])


def _is_ipv6_text(address: IPAddress) -> bool:
    return ":" in str(address)


def _first_octets(address: IPAddress):
    packed = address.packed
    return packed[0], packed[1]


def _looks_public(address: IPAddress) -> bool:
    if _is_ipv6_text(address):
        return False
    b0, b1 = _first_octets(address)
    return (
        b0 != 10  # class A reserved
        and b0 != 127  # loopback
        and (b0 != 172 or b1 < 16 or b1 > 31)  # class B reserved
        and (b0 != 192 or b1 != 168)  # class C reserved
    )


def _is_ipv4_non_loopback(address: IPAddress) -> bool:
    return not _is_ipv6_text(address) and _first_octets(address)[0] != 127


class AddressClassifier:
    """Local/public address classification for this host"""

    def __init__(
        self,
        facade: ResolutionFacade,
        local_addresses: Optional[Iterable[IPAddress]] = None,
        address_lister: Optional[Callable[[], Awaitable[List[IPAddress]]]] = None,
        default_address: Optional[Callable[[], Awaitable[IPAddress]]] = None,
        static_ip: str = "",
    ):
        """
        Initialize classifier

        Args:
            facade: Resolver used for host names that fail the prefix checks
            local_addresses: This host's interface addresses, read from the
                system when omitted
            address_lister: Async callable listing the addresses of the local
                host name
            default_address: Async callable returning the platform's default
                local address
            static_ip: Configured public address that overrides discovery
        """
        self.facade = facade
        if local_addresses is None:
            local_addresses = interface_addresses()
        self.local_addresses: Set[IPAddress] = set(local_addresses)
        self.address_lister = address_lister or hostname_addresses
        self.default_address = default_address or default_local_address
        self.static_ip = static_ip

    @staticmethod
    def has_local_prefix(address: str) -> bool:
        return has_local_prefix(address)

    async def is_local(self, address: str) -> bool:
        """Check whether an address or host name refers to a local network

        Addresses outside the textual prefixes are resolved, which may take
        as long as a DNS query.
        """
        if has_local_prefix(address):
            return True

        try:
            resolved = await self.facade.resolve(address)
        except InvalidHost:
            return False

        if resolved is None:
            return False

        if resolved.is_unspecified or resolved.is_loopback:
            return True

        return resolved in self.local_addresses

    async def my_public_local_address(self) -> IPAddress:
        """Best public-looking address among those of the local host name"""
        try:
            candidates = await self.address_lister()
        except Unresolvable as e:
            logger.error(f"Unable to list local host addresses: {e}")
            candidates = []

        if not candidates:
            try:
                return await self.default_address()
            except Unresolvable as e:
                logger.error(f"Unable to determine default local address: {e}")
                return LOOPBACK

        if len(candidates) == 1:
            return candidates[0]

        for address in candidates:
            if _looks_public(address):
                return address

        for address in candidates:
            if _is_ipv4_non_loopback(address):
                return address

        for address in candidates:
            if not _is_ipv6_text(address):
                return address

        return candidates[0]

    async def my_public_ip(self) -> str:
        """Configured static IP, or the discovered public-looking address"""
        if self.static_ip:
            return self.static_ip
        return str(await self.my_public_local_address())
