"""Fetch a web page over plain HTTP and print everything the server sends."""

from __future__ import annotations

import sys
from typing import BinaryIO, Optional, Sequence

from .address import Address
from .file_descriptor import FileDescriptor
from .socket_wrappers import TCPSocket
from .util import UnixError


def _request(host: str, path: str) -> bytes:
    return f"GET {path} HTTP/1.1\r\nHost: {host}\r\nConnection: close\r\n\r\n".encode()


def _transfer(sock: FileDescriptor, host: str, path: str, out: BinaryIO) -> None:
    sock.write(_request(host, path))
    while not sock.eof():
        out.write(sock.read())
    out.flush()


def get_url(host: str, path: str, out: Optional[BinaryIO] = None) -> None:
    """Request ``path`` from the HTTP service on ``host`` and copy the reply to ``out``."""
    if out is None:
        out = sys.stdout.buffer
    with TCPSocket() as sock:
        try:
            sock.connect(Address(host, "http"))
        except UnixError as error:
            print(f"connect error caused by:{error}", file=sys.stderr)
            raise
        _transfer(sock, host, path, out)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command: ``webget HOST PATH``."""
    prog = sys.argv[0] if sys.argv and sys.argv[0] else "webget"
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        sys.stderr.write(f"Usage: {prog} HOST PATH\n")
        sys.stderr.write(f"\tExample: {prog} example.com /index.html\n")
        return 1
    host, path = args
    try:
        get_url(host, path)
    except Exception as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())