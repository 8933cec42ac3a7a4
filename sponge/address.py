"""IPv4 socket addresses and name resolution."""

from __future__ import annotations

import ipaddress
import socket
from typing import Any, Union

from .util import TaggedError

SockAddr = Union[tuple, str, bytes]


def _family_of(sockaddr: SockAddr) -> int:
    if isinstance(sockaddr, (str, bytes)):
        return socket.AF_UNIX
    if isinstance(sockaddr, tuple) and len(sockaddr) == 2:
        return socket.AF_INET
    if isinstance(sockaddr, tuple) and len(sockaddr) == 4:
        return socket.AF_INET6
    raise ValueError(f"invalid sockaddr: {sockaddr!r}")


class Address:
    """A socket address, built by resolving a host and a service or port.

    ``Address("www.example.com", "https")`` resolves a host name and a
    service name; ``Address("18.71.0.151", 53)`` takes a dotted-quad address
    and a numeric port without doing any lookup.
    """

    __slots__ = ("_family", "_sockaddr")

    def __init__(self, host: str, service: Union[str, int] = 0) -> None:
        if isinstance(service, int):
            if not 0 <= service <= 0xFFFF:
                raise ValueError(f"port out of range: {service}")
            service_text = str(service)
            flags = socket.AI_NUMERICHOST | socket.AI_NUMERICSERV
        else:
            service_text = service
            flags = socket.AI_ALL
        try:
            results = socket.getaddrinfo(host, service_text, socket.AF_INET, 0, 0, flags)
        except socket.gaierror as exc:
            raise TaggedError(
                f"getaddrinfo({host}, {service_text})", exc.errno or 0, exc.strerror or str(exc)
            ) from exc
        if not results:
            raise RuntimeError("getaddrinfo returned successfully but with no results")
        family, _type, _proto, _canonname, sockaddr = results[0]
        self._family = family
        self._sockaddr = tuple(sockaddr)

    @classmethod
    def from_sockaddr(cls, sockaddr: SockAddr) -> "Address":
        """Wrap a socket address as returned by the ``socket`` module."""
        address = cls.__new__(cls)
        address._family = _family_of(sockaddr)
        address._sockaddr = tuple(sockaddr) if isinstance(sockaddr, tuple) else sockaddr
        return address

    @classmethod
    def from_ipv4_numeric(cls, ip_address: int) -> "Address":
        """Create an IPv4 address (port 0) from its 32-bit numeric value."""
        return cls.from_sockaddr((str(ipaddress.IPv4Address(ip_address)), 0))

    def ip_port(self) -> tuple[str, int]:
        """Return the numeric IP address string and the port."""
        if self._family not in (socket.AF_INET, socket.AF_INET6):
            raise TaggedError("getnameinfo", socket.EAI_FAMILY, "ai_family not supported")
        return self._sockaddr[0], int(self._sockaddr[1])

    def ip(self) -> str:
        """Return the numeric IP address string."""
        return self.ip_port()[0]

    def port(self) -> int:
        """Return the port number."""
        return self.ip_port()[1]

    def ipv4_numeric(self) -> int:
        """Return the IPv4 address as a 32-bit integer."""
        if self._family != socket.AF_INET:
            raise RuntimeError("ipv4_numeric called on non-IPV4 address")
        return int(ipaddress.IPv4Address(self._sockaddr[0]))

    def sockaddr(self) -> Any:
        """Return the address in the form the ``socket`` module expects."""
        return self._sockaddr

    @property
    def family(self) -> int:
        """The address family, e.g. ``socket.AF_INET``."""
        return self._family

    def __str__(self) -> str:
        ip, port = self.ip_port()
        return f"{ip}:{port}"

    def __repr__(self) -> str:
        return f"Address.from_sockaddr({self._sockaddr!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self._family == other._family and self._sockaddr == other._sockaddr

    def __hash__(self) -> int:
        return hash((self._family, self._sockaddr))