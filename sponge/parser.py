"""Parsing and serialising big-endian integers for network headers."""

from __future__ import annotations

from enum import Enum
from typing import Union

from .buffer import Buffer


class ParseResult(Enum):
    """The result of parsing or unparsing a datagram, segment, frame or message."""

    NO_ERROR = 0
    BAD_CHECKSUM = 1
    PACKET_TOO_SHORT = 2
    WRONG_IP_VERSION = 3
    HEADER_TOO_SHORT = 4
    TRUNCATED_PACKET = 5
    UNSUPPORTED = 6


_NAMES = {
    ParseResult.NO_ERROR: "NoError",
    ParseResult.BAD_CHECKSUM: "BadChecksum",
    ParseResult.PACKET_TOO_SHORT: "PacketTooShort",
    ParseResult.WRONG_IP_VERSION: "WrongIPVersion",
    ParseResult.HEADER_TOO_SHORT: "HeaderTooShort",
    ParseResult.TRUNCATED_PACKET: "TruncatedPacket",
    ParseResult.UNSUPPORTED: "Unsupported",
}


def as_string(r: ParseResult) -> str:
    """Return the display name of a ParseResult."""
    return _NAMES[r]


class NetParser:
    """Reads network-byte-order integers from the front of a Buffer.

    A read past the end records ParseResult.PACKET_TOO_SHORT and yields 0;
    once an error is recorded, every further read yields 0.
    """

    def __init__(self, buffer: Union[Buffer, bytes, bytearray, memoryview]) -> None:
        self._buffer = Buffer(buffer)
        self._error = ParseResult.NO_ERROR

    def buffer(self) -> Buffer:
        """Return the bytes not yet parsed."""
        return Buffer(self._buffer)

    def get_error(self) -> ParseResult:
        return self._error

    def set_error(self, res: ParseResult) -> None:
        self._error = res

    def error(self) -> bool:
        """Return True if an error has been recorded."""
        return self._error is not ParseResult.NO_ERROR

    def _check_size(self, size: int) -> None:
        if size > len(self._buffer):
            self.set_error(ParseResult.PACKET_TOO_SHORT)

    def _parse_int(self, size: int) -> int:
        self._check_size(size)
        if self.error():
            return 0
        value = int.from_bytes(self._buffer[:size], "big")
        self._buffer.remove_prefix(size)
        return value

    def u32(self) -> int:
        """Parse a 32-bit integer in network byte order."""
        return self._parse_int(4)

    def u16(self) -> int:
        """Parse a 16-bit integer in network byte order."""
        return self._parse_int(2)

    def u8(self) -> int:
        """Parse an 8-bit integer."""
        return self._parse_int(1)

    def remove_prefix(self, n: int) -> None:
        """Skip ``n`` bytes, recording an error if there are not enough."""
        self._check_size(n)
        if self.error():
            return
        self._buffer.remove_prefix(n)


class NetUnparser:
    """Appends network-byte-order integers to a bytearray, truncating to width."""

    @staticmethod
    def _unparse_int(s: bytearray, val: int, size: int) -> None:
        s.extend((val & ((1 << (8 * size)) - 1)).to_bytes(size, "big"))

    @staticmethod
    def u32(s: bytearray, val: int) -> None:
        """Append a 32-bit integer in network byte order."""
        NetUnparser._unparse_int(s, val, 4)

    @staticmethod
    def u16(s: bytearray, val: int) -> None:
        """Append a 16-bit integer in network byte order."""
        NetUnparser._unparse_int(s, val, 2)

    @staticmethod
    def u8(s: bytearray, val: int) -> None:
        """Append an 8-bit integer."""
        NetUnparser._unparse_int(s, val, 1)