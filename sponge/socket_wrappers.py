"""Network sockets (UDP, TCP and Unix-domain stream) built on FileDescriptor."""

from __future__ import annotations

import socket
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .address import Address
from .buffer import Buffer, BufferList, BufferViewList
from .file_descriptor import FileDescriptor
from .util import system_call

Payload = Union[str, bytes, bytearray, memoryview, Buffer, BufferList, BufferViewList]

_MSG_TRUNC = getattr(socket, "MSG_TRUNC", 0)


def _as_view_list(payload: Payload) -> BufferViewList:
    if isinstance(payload, BufferViewList):
        return payload
    return BufferViewList(payload)


class Socket(FileDescriptor):
    """Base class for network sockets; normally used through a subclass."""

    def __init__(self, domain: int, sock_type: int, fd: Optional[FileDescriptor] = None) -> None:
        if fd is None:
            raw = system_call("socket", socket.socket, domain, sock_type, 0)
            super().__init__(raw.detach())
            return

        self._internal = fd._internal
        with self._socket() as sock:
            if sock.family != domain:
                raise RuntimeError("socket domain mismatch")
            if sock.type != sock_type:
                raise RuntimeError("socket type mismatch")

    @contextmanager
    def _socket(self) -> Iterator[socket.socket]:
        """Yield a socket object over this descriptor without taking ownership of it."""
        sock = system_call("socket", socket.socket, -1, -1, -1, self.fd_num())
        try:
            yield sock
        finally:
            sock.detach()

    def bind(self, address: Address) -> None:
        """Bind to a local address, usually before listen/accept."""
        with self._socket() as sock:
            system_call("bind", sock.bind, address.sockaddr())

    def connect(self, address: Address) -> None:
        """Connect to a peer address."""
        with self._socket() as sock:
            system_call("connect", sock.connect, address.sockaddr())

    def shutdown(self, how: int) -> None:
        """Shut down reading (SHUT_RD), writing (SHUT_WR) or both (SHUT_RDWR)."""
        with self._socket() as sock:
            system_call("shutdown", sock.shutdown, how)
        if how == socket.SHUT_RD:
            self._register_read()
        elif how == socket.SHUT_WR:
            self._register_write()
        elif how == socket.SHUT_RDWR:
            self._register_read()
            self._register_write()
        else:
            raise RuntimeError("Socket::shutdown() called with invalid `how`")

    def local_address(self) -> Address:
        """Return the local address of the socket."""
        with self._socket() as sock:
            return Address.from_sockaddr(system_call("getsockname", sock.getsockname))

    def peer_address(self) -> Address:
        """Return the address of the socket's peer."""
        with self._socket() as sock:
            return Address.from_sockaddr(system_call("getpeername", sock.getpeername))

    def set_reuseaddr(self) -> None:
        """Allow the local address to be reused sooner (SO_REUSEADDR)."""
        with self._socket() as sock:
            system_call("setsockopt", sock.setsockopt, socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)


@dataclass
class ReceivedDatagram:
    """A received UDP datagram and the address it came from."""

    source_address: Address
    payload: bytes


class UDPSocket(Socket):
    """An IPv4 UDP socket."""

    def __init__(self, fd: Optional[FileDescriptor] = None) -> None:
        super().__init__(socket.AF_INET, socket.SOCK_DGRAM, fd)

    def recv(self, mtu: int = 65536) -> ReceivedDatagram:
        """Receive one datagram; raise RuntimeError if it is larger than ``mtu``."""
        buffer = bytearray(mtu)
        with self._socket() as sock:
            received, source = system_call("recvfrom", sock.recvfrom_into, buffer, mtu, _MSG_TRUNC)
        if received > mtu:
            raise RuntimeError("recvfrom (oversized datagram)")
        self._register_read()
        return ReceivedDatagram(Address.from_sockaddr(source), bytes(buffer[:received]))

    def _sendmsg(self, payload: Payload, destination: Optional[Address]) -> None:
        views = _as_view_list(payload)
        with self._socket() as sock:
            if destination is None:
                sent = system_call("sendmsg", sock.sendmsg, views.as_iovecs())
            else:
                sent = system_call(
                    "sendmsg", sock.sendmsg, views.as_iovecs(), [], 0, destination.sockaddr()
                )
        if sent != len(views):
            raise RuntimeError("datagram payload too big for sendmsg()")

    def sendto(self, destination: Address, payload: Payload) -> None:
        """Send a datagram to ``destination``."""
        self._sendmsg(payload, destination)
        self._register_write()

    def send(self, payload: Payload) -> None:
        """Send a datagram to the connected peer (connect() must come first)."""
        self._sendmsg(payload, None)
        self._register_write()


class TCPSocket(Socket):
    """An IPv4 TCP socket."""

    def __init__(self, fd: Optional[FileDescriptor] = None) -> None:
        super().__init__(socket.AF_INET, socket.SOCK_STREAM, fd)

    def listen(self, backlog: int = 16) -> None:
        """Mark the socket as listening for incoming connections."""
        with self._socket() as sock:
            system_call("listen", sock.listen, backlog)

    def accept(self) -> "TCPSocket":
        """Block until a connection arrives and return a socket connected to the peer."""
        self._register_read()
        with self._socket() as sock:
            conn, _peer = system_call("accept", sock.accept)
        return TCPSocket(FileDescriptor(conn.detach()))


class LocalStreamSocket(Socket):
    """A Unix-domain stream socket wrapped around an existing descriptor."""

    def __init__(self, fd: FileDescriptor) -> None:
        super().__init__(socket.AF_UNIX, socket.SOCK_STREAM, fd)