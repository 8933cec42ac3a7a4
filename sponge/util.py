"""System-call error handling, timing, randomness, Internet checksums and hex dumps."""

from __future__ import annotations

import os
import random
import sys
import time
from typing import Any, Callable

_PROGRAM_START = time.monotonic_ns()

# Size in bytes of the Mersenne Twister state (624 32-bit words).
_MT_STATE_BYTES = 624 * 4


class TaggedError(OSError):
    """An OSError that also records what was being attempted."""

    def __init__(self, attempt: str, error_code: int, description: str) -> None:
        super().__init__(error_code, description)
        self.attempt = attempt

    def __str__(self) -> str:
        return f"{self.attempt}: {self.strerror}"


class UnixError(TaggedError):
    """A TaggedError raised by a failed system call."""

    def __init__(self, attempt: str, error_code: int) -> None:
        super().__init__(attempt, error_code, os.strerror(error_code))


def system_call(attempt: str, func: Callable[..., Any], *args: Any, errno_mask: int = 0) -> Any:
    """Call ``func(*args)``, turning an OSError into a UnixError naming ``attempt``.

    If the call fails with errno equal to a non-zero ``errno_mask``, None is
    returned instead of raising.
    """
    try:
        return func(*args)
    except TaggedError:
        raise
    except OSError as exc:
        if exc.errno is None:
            raise
        if errno_mask and exc.errno == errno_mask:
            return None
        raise UnixError(attempt, exc.errno) from exc


def get_random_generator() -> random.Random:
    """Return a Mersenne Twister generator seeded with a full state's worth of entropy."""
    seed = int.from_bytes(os.urandom(_MT_STATE_BYTES), "little")
    return random.Random(seed)


def timestamp_ms() -> int:
    """Return the number of milliseconds since the program started."""
    return (time.monotonic_ns() - _PROGRAM_START) // 1_000_000


class InternetChecksum:
    """The Internet (one's complement) checksum, as used by IPv4 and TCP.

    Summing a datagram that carries a correct checksum yields zero.
    """

    def __init__(self, initial_sum: int = 0) -> None:
        self._sum = initial_sum & 0xFFFFFFFF
        self._parity = False

    def add(self, data: bytes) -> None:
        """Add bytes to the running sum, continuing any odd byte from a previous call."""
        view = bytes(data)
        if not view:
            return
        total = self._sum
        if self._parity:
            total += view[0]
            view = view[1:]
        total += (sum(view[0::2]) << 8) + sum(view[1::2])
        self._sum = total & 0xFFFFFFFF
        self._parity = len(view) % 2 == 1

    def value(self) -> int:
        """Return the 16-bit checksum in host byte order."""
        ret = self._sum
        while ret > 0xFFFF:
            ret = (ret >> 16) + (ret & 0xFFFF)
        return ~ret & 0xFFFF


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte < 0x7F else "."


def _format_hexdump(data: bytes, indent: int = 0) -> str:
    data = bytes(data)
    pad = " " * indent
    parts: list[str] = []
    chars: list[str] = []
    for printed, byte in enumerate(data):
        if printed % 16 == 0:
            if printed:
                parts.append("    " + ("".join(chars) or " ") + "\n")
                chars = []
            parts.append(f"{pad}{printed:08x}:    ")
        elif printed % 2 == 0:
            parts.append(" ")
        parts.append(f"{byte:02x}")
        chars.append(_printable(byte))
    remainder = (16 - len(data) % 16) % 16
    parts.append(" " * (2 * remainder + remainder // 2 + 4))
    parts.append("".join(chars) or " ")
    parts.append("\n\n")
    return "".join(parts)


def hexdump(data: bytes, indent: int = 0) -> None:
    """Print a hex dump of ``data`` to standard output, indented by ``indent`` spaces."""
    sys.stdout.write(_format_hexdump(data, indent))
    sys.stdout.flush()