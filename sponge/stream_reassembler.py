"""Reassembly of possibly out-of-order, overlapping substrings into a ByteStream."""

from __future__ import annotations

from typing import Optional, Union

from .byte_stream import ByteStream

BytesLike = Union[bytes, bytearray, memoryview]


class StreamReassembler:
    """Assembles excerpts of a byte stream into an in-order ByteStream.

    The capacity bounds both the reassembled bytes not yet read and the bytes
    held waiting for earlier gaps to be filled; anything beyond is discarded.
    """

    def __init__(self, capacity: int) -> None:
        self._output = ByteStream(capacity)
        self._capacity = capacity
        # Storage for the window that starts at the first unassembled byte.
        self._pending = bytearray(capacity)
        self._filled = bytearray(capacity)
        self._eof_index: Optional[int] = None

    def push_substring(self, data: BytesLike, index: int, eof: bool) -> None:
        """Accept ``data`` starting at stream position ``index``.

        ``eof`` marks the last byte of ``data`` as the last byte of the stream.
        Newly contiguous bytes are written to the output stream.
        """
        data = bytes(data)
        first_unassembled = self._output.bytes_written()
        first_unacceptable = self._output.bytes_read() + self._capacity
        data_end = index + len(data)

        if eof and data_end <= first_unacceptable:
            self._eof_index = data_end
            cut = max(data_end - first_unassembled, 0)
            if cut < self._capacity:
                self._filled[cut:] = bytes(self._capacity - cut)

        start = max(index, first_unassembled)
        end = min(data_end, first_unacceptable)
        if self._eof_index is not None:
            end = min(end, self._eof_index)
        if start < end:
            lo = start - first_unassembled
            hi = end - first_unassembled
            self._pending[lo:hi] = data[start - index : end - index]
            self._filled[lo:hi] = b"\x01" * (hi - lo)

        self._assemble()

        if self._eof_index is not None and self._output.bytes_written() >= self._eof_index:
            self._output.end_input()

    def _assemble(self) -> None:
        ready = self._filled.find(0)
        if ready == -1:
            ready = self._capacity
        if ready == 0:
            return
        self._output.write(self._pending[:ready])
        del self._pending[:ready]
        self._pending.extend(bytes(ready))
        del self._filled[:ready]
        self._filled.extend(bytes(ready))

    def stream_out(self) -> ByteStream:
        """Return the reassembled in-order byte stream."""
        return self._output

    def unassembled_bytes(self) -> int:
        """Return how many distinct bytes are stored but not yet reassembled."""
        return self._filled.count(1)

    def empty(self) -> bool:
        """Return True if no bytes are waiting to be assembled."""
        return self.unassembled_bytes() == 0