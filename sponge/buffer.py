"""Shared read-only byte buffers that can discard bytes from the front."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Union

BytesLike = Union[bytes, bytearray, memoryview]


class Buffer:
    """A read-only byte string sharing its storage, with a movable start."""

    __slots__ = ("_storage", "_offset")

    def __init__(self, data: Union["Buffer", BytesLike] = b"") -> None:
        if isinstance(data, Buffer):
            self._storage = data._storage
            self._offset = data._offset
        else:
            contents = bytes(data)
            self._storage = contents if contents else None
            self._offset = 0

    def _view(self) -> memoryview:
        if self._storage is None:
            return memoryview(b"")
        return memoryview(self._storage)[self._offset :]

    def __bytes__(self) -> bytes:
        if self._storage is None:
            return b""
        return self._storage[self._offset :]

    def __getitem__(self, n: Union[int, slice]) -> Union[int, bytes]:
        """Return the byte at ``n``, or the bytes of a slice."""
        if isinstance(n, slice):
            return self._view()[n].tobytes()
        if not 0 <= n < len(self):
            raise IndexError("Buffer.at")
        return self._storage[self._offset + n]

    def __len__(self) -> int:
        if self._storage is None:
            return 0
        return len(self._storage) - self._offset

    def __repr__(self) -> str:
        return f"Buffer({bytes(self)!r})"

    def copy(self) -> bytes:
        """Return the contents as a new bytes object."""
        return bytes(self)

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes without copying."""
        if n < 0 or n > len(self):
            raise IndexError("Buffer.remove_prefix")
        self._offset += n
        if self._storage is not None and self._offset == len(self._storage):
            self._storage = None
            self._offset = 0


class BufferList:
    """A discontiguous byte string built from a queue of Buffers."""

    def __init__(self, data: Union["BufferList", Buffer, BytesLike, None] = None) -> None:
        self._buffers: deque[Buffer] = deque()
        if data is None:
            return
        if isinstance(data, BufferList):
            self.append(data)
        else:
            self._buffers.append(Buffer(data))

    def buffers(self) -> tuple[Buffer, ...]:
        """Return the underlying Buffers (independent handles to the same bytes)."""
        return tuple(Buffer(buf) for buf in self._buffers)

    def append(self, other: "BufferList") -> None:
        """Append every Buffer of ``other``."""
        for buf in tuple(other._buffers):
            self._buffers.append(Buffer(buf))

    def to_buffer(self) -> Buffer:
        """Return the contents as one Buffer; only possible when there is at most one."""
        if not self._buffers:
            return Buffer()
        if len(self._buffers) == 1:
            return Buffer(self._buffers[0])
        raise RuntimeError(
            "BufferList: please use concatenate() to combine a multi-Buffer BufferList into one Buffer"
        )

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across the Buffers."""
        while n > 0:
            if not self._buffers:
                raise IndexError("BufferList.remove_prefix")
            front = self._buffers[0]
            if n < len(front):
                front.remove_prefix(n)
                n = 0
            else:
                n -= len(front)
                self._buffers.popleft()

    def __len__(self) -> int:
        return sum(len(buf) for buf in self._buffers)

    def concatenate(self) -> bytes:
        """Return all the bytes joined into one bytes object."""
        return b"".join(bytes(buf) for buf in self._buffers)


class BufferViewList:
    """A non-owning view of a discontiguous byte string."""

    def __init__(self, data: Union[BufferList, Buffer, BytesLike, str]) -> None:
        self._views: deque[memoryview] = deque()
        if isinstance(data, BufferList):
            self._views.extend(buf._view() for buf in data._buffers)
        elif isinstance(data, Buffer):
            self._views.append(data._view())
        elif isinstance(data, str):
            self._views.append(memoryview(data.encode()))
        else:
            self._views.append(memoryview(data).cast("B"))

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across the views."""
        while n > 0:
            if not self._views:
                raise IndexError("BufferViewList.remove_prefix")
            front = self._views[0]
            if n < front.nbytes:
                self._views[0] = front[n:]
                n = 0
            else:
                n -= front.nbytes
                self._views.popleft()

    def __len__(self) -> int:
        return sum(view.nbytes for view in self._views)

    def as_iovecs(self) -> list[memoryview]:
        """Return the views as a list suitable for ``os.writev`` or ``socket.sendmsg``."""
        return list(self._views)


def _join(views: Iterable[memoryview]) -> bytes:
    return b"".join(views)