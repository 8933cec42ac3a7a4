import errno
import os

import pytest

from sponge.buffer import BufferList, BufferViewList
from sponge.file_descriptor import FileDescriptor
from sponge.util import UnixError


@pytest.fixture
def pipe():
    r, w = os.pipe()
    reader, writer = FileDescriptor(r), FileDescriptor(w)
    yield reader, writer
    for fd in (reader, writer):
        if not fd.closed():
            fd.close()


def test_write_then_read(pipe):
    reader, writer = pipe
    assert writer.write(b"hello") == 5
    assert writer.write_count() == 1
    assert reader.read() == b"hello"
    assert reader.read_count() == 1
    assert not reader.eof()


def test_write_str_and_buffer_list(pipe):
    reader, writer = pipe
    assert writer.write("hi ") == 3
    pieces = BufferList(b"there")
    pieces.append(BufferList(b" you"))
    assert writer.write(pieces) == 9
    assert reader.read() == b"hi there you"


def test_write_buffer_view_list_leaves_caller_untouched(pipe):
    reader, writer = pipe
    views = BufferViewList(b"abcdef")
    assert writer.write(views) == 6
    assert len(views) == 6
    assert reader.read() == b"abcdef"


def test_read_respects_limit(pipe):
    reader, writer = pipe
    writer.write(b"abcdef")
    assert reader.read(2) == b"ab"
    assert reader.read(10) == b"cdef"
    assert reader.read_count() == 2


def test_eof_after_writer_closes(pipe):
    reader, writer = pipe
    writer.close()
    assert writer.closed()
    assert writer.eof()
    assert reader.read() == b""
    assert reader.eof()


def test_zero_limit_read_does_not_set_eof(pipe):
    reader, writer = pipe
    writer.close()
    assert reader.read(0) == b""
    assert not reader.eof()


def test_duplicate_shares_state(pipe):
    reader, writer = pipe
    dup = writer.duplicate()
    assert dup.fd_num() == writer.fd_num()
    dup.write(b"x")
    assert writer.write_count() == 1
    dup.close()
    assert writer.closed()
    assert reader.read() == b"x"


def test_invalid_fd_number():
    with pytest.raises(ValueError):
        FileDescriptor(-1)


def test_double_close_raises(pipe):
    _reader, writer = pipe
    writer.close()
    with pytest.raises(UnixError) as info:
        writer.close()
    assert info.value.errno == errno.EBADF


def test_nonblocking_read_on_empty_pipe(pipe):
    reader, _writer = pipe
    reader.set_blocking(False)
    with pytest.raises(UnixError) as info:
        reader.read()
    assert info.value.errno == errno.EAGAIN
    assert reader.read_count() == 0
    reader.set_blocking(True)
    assert os.get_blocking(reader.fd_num()) is True


def test_context_manager_closes():
    r, w = os.pipe()
    os.close(w)
    with FileDescriptor(r) as fd:
        assert fd.read() == b""
    assert fd.closed()
    with pytest.raises(OSError):
        os.fstat(r)


def test_dropping_last_handle_closes():
    r, w = os.pipe()
    os.close(w)
    fd = FileDescriptor(r)
    dup = fd.duplicate()
    del fd
    assert os.fstat(r) is not None and not dup.closed()
    del dup
    with pytest.raises(OSError):
        os.fstat(r)