"""Byte streams, stream reassembly, packet parsing, checksums, addresses and sockets for a user-space TCP stack."""

__version__ = "0.1.0"

__all__ = [
    "address",
    "buffer",
    "byte_stream",
    "file_descriptor",
    "parser",
    "socket_wrappers",
    "stream_reassembler",
    "util",
    "webget",
]