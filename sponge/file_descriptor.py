"""Reference-counted handles to kernel file descriptors."""

from __future__ import annotations

import os
import sys
from typing import Optional, Union

from .buffer import Buffer, BufferList, BufferViewList
from .util import system_call

_MAX_READ = 1024 * 1024

WriteData = Union[str, bytes, bytearray, memoryview, Buffer, BufferList, BufferViewList]


class _FDWrapper:
    """The shared state behind one kernel file descriptor; closes it when dropped."""

    __slots__ = ("fd", "eof", "closed", "read_count", "write_count")

    def __init__(self, fd: int) -> None:
        if fd < 0:
            raise ValueError(f"invalid fd number:{fd}")
        self.fd = fd
        self.eof = False
        self.closed = False
        self.read_count = 0
        self.write_count = 0

    def close(self) -> None:
        system_call("close", os.close, self.fd)
        self.eof = self.closed = True

    def __del__(self) -> None:
        if getattr(self, "closed", True):
            return
        try:
            self.close()
        except Exception as exc:  # never raise from a finaliser
            print(f"Exception destructing FDWrapper: {exc}", file=sys.stderr)


class FileDescriptor:
    """A handle to a file descriptor, shared by every duplicate of it.

    The descriptor is closed explicitly with close(), on leaving a ``with``
    block, or when the last handle sharing it is dropped. Reads and writes
    are counted so that callers can detect busy loops.
    """

    def __init__(self, fd: int) -> None:
        self._internal = _FDWrapper(fd)

    def _register_read(self) -> None:
        self._internal.read_count += 1

    def _register_write(self) -> None:
        self._internal.write_count += 1

    def read(self, limit: Optional[int] = None) -> bytes:
        """Read up to ``limit`` bytes (at most 1 MiB); fewer may be returned."""
        size = _MAX_READ if limit is None else min(_MAX_READ, limit)
        data = system_call("read", os.read, self.fd_num(), size)
        if size > 0 and not data:
            self._internal.eof = True
        if len(data) > size:
            raise RuntimeError("read() read more than requested")
        self._register_read()
        return data

    def write(self, data: WriteData, write_all: bool = True) -> int:
        """Write ``data``; with ``write_all`` keep going until all of it is written."""
        if isinstance(data, BufferViewList):
            buffer = BufferViewList(b"".join(data.as_iovecs()))
        else:
            buffer = BufferViewList(data)

        total = 0
        while True:
            written = system_call("writev", os.writev, self.fd_num(), buffer.as_iovecs())
            if written == 0 and len(buffer) != 0:
                raise RuntimeError("write returned 0 given non-empty input buffer")
            if written > len(buffer):
                raise RuntimeError("write wrote more than length of input buffer")
            self._register_write()
            buffer.remove_prefix(written)
            total += written
            if not (write_all and len(buffer)):
                return total

    def close(self) -> None:
        """Close the underlying file descriptor."""
        self._internal.close()

    def duplicate(self) -> "FileDescriptor":
        """Return another handle sharing this descriptor and its state."""
        copy = object.__new__(FileDescriptor)
        copy._internal = self._internal
        return copy

    def set_blocking(self, blocking_state: bool) -> None:
        """Make the descriptor blocking (True) or non-blocking (False)."""
        system_call("fcntl", os.set_blocking, self.fd_num(), blocking_state)

    def fd_num(self) -> int:
        return self._internal.fd

    def eof(self) -> bool:
        return self._internal.eof

    def closed(self) -> bool:
        return self._internal.closed

    def read_count(self) -> int:
        return self._internal.read_count

    def write_count(self) -> int:
        return self._internal.write_count

    def __enter__(self) -> "FileDescriptor":
        return self

    def __exit__(self, *args: object) -> None:
        if not self.closed():
            self.close()