"""
Resolution Primitives

Live name -> address lookups consumed by the resolution facade. Any object with an
async ``resolve(host) -> Resolution`` method that raises ``Unresolvable`` on
failure can be injected instead; the two implementations here cover the
platform resolver and direct DNS queries through dnspython.
"""

import asyncio
import ipaddress
import logging
import socket
from dataclasses import dataclass
from typing import List, Optional, Union

import dns.asyncresolver
import dns.exception
import dns.resolver

from ..errors import Unresolvable

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass(frozen=True)
class Resolution:
    """Outcome of a successful live lookup"""

    name: str  # canonical host name, lowercase, no trailing dot
    address: IPAddress


def parse_address(text: str) -> IPAddress:
    """Parse an address string, dropping any IPv6 zone suffix"""
    return ipaddress.ip_address(text.split("%", 1)[0])


def canonical_name(name: Optional[str], fallback: str) -> str:
    if not name:
        name = fallback
    return name.rstrip(".").lower()


class SystemResolver:
    """Platform resolver via the event loop's getaddrinfo"""

    def __init__(self, timeout: float = 5.0):
        self.timeout = timeout

    async def resolve(self, host: str) -> Resolution:
        loop = asyncio.get_running_loop()
        try:
            infos = await asyncio.wait_for(
                loop.getaddrinfo(
                    host, None, type=socket.SOCK_STREAM, flags=socket.AI_CANONNAME
                ),
                self.timeout,
            )
        except asyncio.TimeoutError:
            raise Unresolvable(host, "timeout")
        except (socket.gaierror, UnicodeError) as e:
            raise Unresolvable(host, str(e)) from e

        if not infos:
            raise Unresolvable(host, "no addresses")

        _family, _type, _proto, canonname, sockaddr = infos[0]
        return Resolution(
            name=canonical_name(canonname, host), address=parse_address(sockaddr[0])
        )

    async def reverse_lookup(self, address: str) -> str:
        loop = asyncio.get_running_loop()
        try:
            name, _port = await asyncio.wait_for(
                loop.getnameinfo((address, 0), socket.NI_NAMEREQD), self.timeout
            )
        except asyncio.TimeoutError:
            raise Unresolvable(address, "timeout")
        except (socket.gaierror, socket.herror, ValueError) as e:
            raise Unresolvable(address, str(e)) from e
        return canonical_name(name, address)


class DnspythonResolver:
    """Direct A/AAAA queries with dnspython's async resolver"""

    RECORD_TYPES = ("A", "AAAA")

    def __init__(self, timeout: float = 5.0, nameservers: Optional[List[str]] = None):
        self.timeout = timeout
        self._resolver = dns.asyncresolver.Resolver(configure=not nameservers)
        if nameservers:
            self._resolver.nameservers = list(nameservers)
        self._resolver.lifetime = timeout

    async def resolve(self, host: str) -> Resolution:
        try:
            return Resolution(name=host.lower(), address=parse_address(host))
        except ValueError:
            pass

        last_error = "no answer"
        for rdtype in self.RECORD_TYPES:
            try:
                answer = await self._resolver.resolve(host, rdtype)
            except dns.resolver.NXDOMAIN as e:
                raise Unresolvable(host, "NXDOMAIN") from e
            except dns.resolver.NoAnswer:
                continue
            except dns.exception.DNSException as e:
                last_error = str(e) or type(e).__name__
                logger.debug(f"{rdtype} lookup for {host} failed: {last_error}")
                continue

            name = answer.canonical_name.to_text(omit_final_dot=True)
            return Resolution(
                name=canonical_name(name, host), address=parse_address(answer[0].address)
            )

        raise Unresolvable(host, last_error)

    async def reverse_lookup(self, address: str) -> str:
        try:
            answer = await self._resolver.resolve_address(address)
        except (dns.exception.DNSException, ValueError) as e:
            raise Unresolvable(address, str(e)) from e
        return canonical_name(answer[0].target.to_text(), address)


def create_resolver(config) -> Union[SystemResolver, DnspythonResolver]:
    """Build the live resolver selected by a ResolverConfig"""
    if config.backend == "dnspython":
        return DnspythonResolver(timeout=config.timeout, nameservers=config.nameservers)
    return SystemResolver(timeout=config.timeout)
