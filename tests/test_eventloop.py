import os
import select

import pytest

from spongenet.eventloop import Direction, EventLoop, EventLoopResult
from spongenet.file_descriptor import FileDescriptor


@pytest.fixture
def pipe():
    r, w = os.pipe()
    reader, writer = FileDescriptor(r), FileDescriptor(w)
    yield reader, writer
    for fd in (reader, writer):
        if not fd.closed:
            fd.close()


def test_direction_values_match_poll_flags():
    assert Direction(select.POLLIN) is Direction.IN
    assert Direction(select.POLLOUT) is Direction.OUT


def test_no_rules_exits():
    assert EventLoop().wait_next_event(0) is EventLoopResult.EXIT


def test_readable_rule_runs_callback(pipe):
    reader, writer = pipe
    writer.write(b"hello")
    got = []
    loop = EventLoop()
    loop.add_rule(reader, Direction.IN, lambda: got.append(reader.read()))
    assert loop.wait_next_event(100) is EventLoopResult.SUCCESS
    assert got == [b"hello"]


def test_timeout_when_nothing_ready(pipe):
    reader, _writer = pipe
    got = []
    loop = EventLoop()
    loop.add_rule(reader, Direction.IN, lambda: got.append(reader.read()))
    assert loop.wait_next_event(0) is EventLoopResult.TIMEOUT
    assert got == []


def test_uninterested_rules_exit(pipe):
    reader, writer = pipe
    writer.write(b"x")
    got = []
    loop = EventLoop()
    loop.add_rule(reader, Direction.IN, lambda: got.append(reader.read()), lambda: False)
    assert loop.wait_next_event(0) is EventLoopResult.EXIT
    assert got == []


def test_busy_wait_detected(pipe):
    reader, writer = pipe
    writer.write(b"x")
    loop = EventLoop()
    loop.add_rule(reader, Direction.IN, lambda: None)
    with pytest.raises(RuntimeError, match="busy wait"):
        loop.wait_next_event(100)


def test_writable_rule(pipe):
    reader, writer = pipe
    loop = EventLoop()
    loop.add_rule(writer, Direction.OUT, lambda: writer.write(b"abc"), lambda: writer.write_count == 0)
    assert loop.wait_next_event(100) is EventLoopResult.SUCCESS
    assert reader.read(10) == b"abc"


def test_closed_descriptor_cancels_rule(pipe):
    reader, _writer = pipe
    cancelled = []
    loop = EventLoop()
    loop.add_rule(reader, Direction.IN, lambda: reader.read(), cancel=lambda: cancelled.append(True))
    reader.close()
    assert loop.wait_next_event(0) is EventLoopResult.EXIT
    assert cancelled == [True]


def test_hangup_or_eof_cancels_rule(pipe):
    reader, writer = pipe
    cancelled = []
    loop = EventLoop()
    loop.add_rule(reader, Direction.IN, lambda: reader.read(), cancel=lambda: cancelled.append(True))
    writer.close()
    loop.wait_next_event(100)
    second = loop.wait_next_event(0)
    assert second is EventLoopResult.EXIT
    assert cancelled == [True]


def test_callback_sees_eof_then_rule_is_dropped(pipe):
    reader, writer = pipe
    writer.write(b"end")
    chunks = []
    loop = EventLoop()
    loop.add_rule(reader, Direction.IN, lambda: chunks.append(reader.read()))
    assert loop.wait_next_event(100) is EventLoopResult.SUCCESS
    writer.close()
    loop.wait_next_event(100)
    assert loop.wait_next_event(0) is EventLoopResult.EXIT
    assert chunks[0] == b"end"