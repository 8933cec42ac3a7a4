"""A flow-controlled, in-memory, in-order byte stream."""

from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


class ByteStream:
    """An in-order byte stream with a fixed capacity.

    Bytes are written on the input side and read from the output side. The
    writer can end the input, after which the stream reaches end of file once
    every buffered byte has been read.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity can not be zero")
        self._capacity = capacity
        self._buffer = bytearray()
        self._input_ended = False
        self._error = False
        self._bytes_written = 0
        self._bytes_read = 0

    # Input side

    def write(self, data: BytesLike) -> int:
        """Write as many bytes of ``data`` as fit; return how many were accepted."""
        accepted = min(len(data), self.remaining_capacity())
        if accepted:
            self._buffer += memoryview(data).cast("B")[:accepted]
            self._bytes_written += accepted
        return accepted

    def remaining_capacity(self) -> int:
        """Return how many more bytes the stream has room for."""
        return self._capacity - len(self._buffer)

    def end_input(self) -> None:
        """Signal that no more bytes will be written."""
        self._input_ended = True

    def set_error(self) -> None:
        """Mark the stream as having suffered an error."""
        self._error = True

    # Output side

    def peek_output(self, length: int) -> bytes:
        """Return up to ``length`` bytes from the front without removing them."""
        return bytes(self._buffer[: max(length, 0)])

    def pop_output(self, length: int) -> None:
        """Remove up to ``length`` bytes from the front."""
        count = min(max(length, 0), len(self._buffer))
        del self._buffer[:count]
        self._bytes_read += count

    def read(self, length: int) -> bytes:
        """Remove and return up to ``length`` bytes from the front."""
        data = self.peek_output(length)
        self.pop_output(length)
        return data

    def input_ended(self) -> bool:
        return self._input_ended

    def error(self) -> bool:
        return self._error

    def buffer_size(self) -> int:
        """Return how many bytes can currently be read."""
        return len(self._buffer)

    def buffer_empty(self) -> bool:
        return not self._buffer

    def eof(self) -> bool:
        """Return True once the input has ended and every byte has been read."""
        return self._input_ended and not self._buffer

    # Accounting

    def bytes_written(self) -> int:
        """Total number of bytes ever accepted."""
        return self._bytes_written

    def bytes_read(self) -> int:
        """Total number of bytes ever popped."""
        return self._bytes_read