# sponge

Building blocks for a user-space TCP implementation, in pure Python with no
third-party dependencies.

## Modules

- `sponge.byte_stream` – `ByteStream`, a bounded, in-order byte stream.
  The writer side has `write` (returns how many bytes fit), `end_input` and
  `remaining_capacity`; the reader side has `peek_output`, `pop_output`,
  `read`, `buffer_size`, `buffer_empty` and `eof`. `bytes_written` and
  `bytes_read` count the totals. A capacity of zero raises `ValueError`.
- `sponge.stream_reassembler` – `StreamReassembler`, which accepts possibly
  out-of-order, overlapping substrings with `push_substring(data, index, eof)`
  and writes the contiguous bytes into the `ByteStream` returned by
  `stream_out()`. Bytes beyond the capacity are discarded;
  `unassembled_bytes()` and `empty()` report what is waiting.
- `sponge.buffer` – `Buffer`, `BufferList` and `BufferViewList`, byte
  containers that share storage and can discard bytes from the front with
  `remove_prefix`.
- `sponge.parser` – `NetParser` reads big-endian `u8`, `u16` and `u32`
  values from a buffer, recording `ParseResult.PACKET_TOO_SHORT` instead of
  raising when data runs out; `NetUnparser` appends them to a `bytearray`.
  `as_string` gives a `ParseResult`'s display name.
- `sponge.util` – `InternetChecksum`, `hexdump`, `timestamp_ms`,
  `get_random_generator`, and `system_call`, which turns an `OSError` into a
  `UnixError` naming the attempted call.
- `sponge.address` – `Address`, an IPv4 socket address made by resolving a
  host and service (`Address("www.example.com", "https")`) or from a dotted
  quad and a numeric port (`Address("18.71.0.151", 53)`), with `ip`, `port`,
  `ipv4_numeric` and `Address.from_ipv4_numeric`.
- `sponge.file_descriptor` – `FileDescriptor`, a shared handle to a kernel
  descriptor that counts reads and writes, tracks end of file, and closes on
  `close()`, at the end of a `with` block, or when the last handle goes away.
- `sponge.socket_wrappers` – `UDPSocket` (`sendto`, `send`, `recv` returning
  a `ReceivedDatagram`), `TCPSocket` (`listen`, `accept`) and
  `LocalStreamSocket`, all with `bind`, `connect`, `shutdown`,
  `local_address`, `peer_address` and `set_reuseaddr`.
- `sponge.webget` – `get_url(host, path, out)` and the `webget` command.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from sponge.byte_stream import ByteStream
from sponge.stream_reassembler import StreamReassembler

stream = ByteStream(15)
assert stream.write(b"cat") == 3
assert stream.peek_output(3) == b"cat"
stream.end_input()
assert stream.read(3) == b"cat"
assert stream.eof()

reassembler = StreamReassembler(65000)
reassembler.push_substring(b"b", 1, False)
assert reassembler.unassembled_bytes() == 1
reassembler.push_substring(b"a", 0, False)
assert reassembler.stream_out().read(2) == b"ab"
```

## Command line

`webget` sends an HTTP/1.1 `GET` request with `Connection: close` and copies
everything the server sends back to standard output until the connection
closes:

```
webget example.com /index.html
```

It takes exactly two arguments, the host name and the path. With any other
number of arguments it prints a usage message and exits with status 1; an
error while connecting or transferring is printed to standard error and also
exits with status 1.

## What it does not do

There is no event loop: the package offers no way to wait on several file
descriptors at once and dispatch callbacks. Sockets and file descriptors are
used with blocking calls, or made non-blocking with
`FileDescriptor.set_blocking(False)` and driven by the caller.