import pytest

from spongenet.buffer import Buffer, BufferList, BufferViewList


def test_buffer_holds_bytes():
    data = b"hello world"
    buf = Buffer(data)
    assert len(buf) == len(data)
    assert bytes(buf) == data
    assert buf.copy() == data


def test_buffer_at():
    data = b"abc"
    buf = Buffer(data)
    assert buf.at(0) == data[0]
    assert buf.at(2) == data[2]
    with pytest.raises(IndexError):
        buf.at(len(data))


def test_buffer_remove_prefix():
    data = b"abcdef"
    buf = Buffer(data)
    buf.remove_prefix(2)
    assert buf.copy() == data[2:]
    assert buf.at(0) == data[2]
    buf.remove_prefix(len(data) - 2)
    assert len(buf) == 0
    assert buf.copy() == b""


def test_buffer_remove_prefix_too_long():
    buf = Buffer(b"ab")
    with pytest.raises(IndexError):
        buf.remove_prefix(3)


def test_buffer_copies_are_independent():
    data = b"abcdef"
    first = Buffer(data)
    second = Buffer(first)
    second.remove_prefix(3)
    assert first.copy() == data
    assert second.copy() == data[3:]


def test_empty_buffer():
    buf = Buffer()
    assert len(buf) == 0
    assert bytes(buf) == b""
    with pytest.raises(IndexError):
        buf.remove_prefix(1)


def test_buffer_equality():
    assert Buffer(b"xyz") == b"xyz"
    assert Buffer(b"xyz") == Buffer(b"xyz")
    assert not (Buffer(b"xyz") == b"xy")


def test_buffer_rejects_str():
    with pytest.raises(TypeError):
        Buffer("text")


def test_buffer_list_concatenate_and_len():
    head, tail = b"header", b"payload"
    bl = BufferList(head)
    bl.append(BufferList(tail))
    assert bl.concatenate() == head + tail
    assert len(bl) == len(head) + len(tail)
    assert len(bl.buffers) == 2


def test_buffer_list_to_buffer():
    assert len(BufferList().to_buffer()) == 0
    assert BufferList(b"one").to_buffer() == b"one"
    bl = BufferList(b"one")
    bl.append(b"two")
    with pytest.raises(ValueError):
        bl.to_buffer()


def test_buffer_list_remove_prefix_across_buffers():
    bl = BufferList(b"abc")
    bl.append(b"defg")
    bl.remove_prefix(4)
    assert bl.concatenate() == b"abcdefg"[4:]
    assert len(bl.buffers) == 1
    bl.remove_prefix(len(bl))
    assert len(bl) == 0
    with pytest.raises(IndexError):
        bl.remove_prefix(1)


def test_buffer_list_remove_prefix_exact_buffer():
    bl = BufferList(b"abc")
    bl.append(b"def")
    bl.remove_prefix(3)
    assert bl.buffers == (Buffer(b"def"),)


def test_buffer_list_append_does_not_share_offsets():
    source = BufferList(b"abcdef")
    target = BufferList()
    target.append(source)
    target.remove_prefix(2)
    assert source.concatenate() == b"abcdef"
    assert target.concatenate() == b"cdef"


def test_buffer_view_list_from_buffer_list():
    bl = BufferList(b"abc")
    bl.append(b"de")
    views = BufferViewList(bl)
    assert len(views) == len(bl)
    assert b"".join(views.as_views()) == bl.concatenate()


def test_buffer_view_list_remove_prefix():
    bl = BufferList(b"abc")
    bl.append(b"def")
    views = BufferViewList(bl)
    views.remove_prefix(4)
    assert bytes(views) == b"abcdef"[4:]
    assert len(views.as_views()) == 1
    with pytest.raises(IndexError):
        views.remove_prefix(len(views) + 1)


def test_buffer_view_list_from_bytes():
    views = BufferViewList(b"hello")
    views.remove_prefix(1)
    assert bytes(views) == b"ello"
    assert len(views) == len(b"ello")