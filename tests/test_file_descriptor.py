import os

import pytest

from spongenet.buffer import BufferList, BufferViewList
from spongenet.file_descriptor import FileDescriptor


@pytest.fixture
def pipe():
    read_end, write_end = os.pipe()
    reader, writer = FileDescriptor(read_end), FileDescriptor(write_end)
    yield reader, writer
    for handle in (reader, writer):
        if not handle.closed:
            handle.close()


def test_negative_fd_rejected():
    with pytest.raises(ValueError):
        FileDescriptor(-1)


def test_non_int_rejected():
    with pytest.raises(TypeError):
        FileDescriptor("3")


def test_write_then_read(pipe):
    reader, writer = pipe
    assert writer.write(b"hello") == 5
    assert reader.read() == b"hello"
    assert writer.write_count == 1
    assert reader.read_count == 1


def test_read_respects_limit(pipe):
    reader, writer = pipe
    writer.write(b"abcdef")
    assert reader.read(3) == b"abc"
    assert reader.read(3) == b"def"
    assert reader.read_count == 2


def test_eof_after_writer_closed(pipe):
    reader, writer = pipe
    writer.close()
    assert writer.closed
    assert writer.eof
    assert reader.read() == b""
    assert reader.eof


def test_zero_limit_read_does_not_set_eof(pipe):
    reader, writer = pipe
    writer.close()
    assert reader.read(0) == b""
    assert reader.eof is False
    assert reader.read_count == 1


def test_negative_limit_rejected(pipe):
    reader, _ = pipe
    with pytest.raises(ValueError):
        reader.read(-1)


def test_write_buffer_list(pipe):
    reader, writer = pipe
    data = BufferList(b"abc")
    data.append(b"def")
    assert writer.write(data) == 6
    assert reader.read() == b"abcdef"
    assert len(data) == 6


def test_write_buffer_view_list_is_not_consumed(pipe):
    reader, writer = pipe
    views = BufferViewList(b"xyz123")
    views.remove_prefix(3)
    assert writer.write(views) == 3
    assert reader.read() == b"123"
    assert len(views) == 3


def test_write_empty_counts_a_write(pipe):
    _, writer = pipe
    assert writer.write(b"") == 0
    assert writer.write_count == 1


def test_write_without_write_all(pipe):
    reader, writer = pipe
    assert writer.write(b"data", write_all=False) == 4
    assert reader.read() == b"data"


def test_write_str_rejected(pipe):
    _, writer = pipe
    with pytest.raises(TypeError):
        writer.write("text")


def test_duplicate_shares_state(pipe):
    reader, writer = pipe
    copy = writer.duplicate()
    assert copy.fd_num == writer.fd_num
    copy.write(b"x")
    assert writer.write_count == 1
    copy.close()
    assert writer.closed
    assert reader.read() == b"x"


def test_close_twice_raises(pipe):
    _, writer = pipe
    writer.close()
    with pytest.raises(OSError):
        writer.close()


def test_context_manager_closes():
    read_end, write_end = os.pipe()
    os.close(write_end)
    with FileDescriptor(read_end) as handle:
        assert handle.read() == b""
    assert handle.closed


def test_nonblocking_read_raises(pipe):
    reader, _ = pipe
    reader.set_blocking(False)
    with pytest.raises(BlockingIOError):
        reader.read()
    reader.set_blocking(True)
    assert os.get_blocking(reader.fd_num) is True


def test_fileno_matches_fd_num():
    read_end, write_end = os.pipe()
    with FileDescriptor(read_end) as reader, FileDescriptor(write_end) as writer:
        assert reader.fileno() == read_end
        assert writer.fd_num == write_end