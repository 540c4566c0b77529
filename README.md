# spongenet

Building blocks for a TCP stack that runs in user space:

- `spongenet.buffer`: `Buffer`, `BufferList` and `BufferViewList`, shared byte
  buffers that drop bytes from the front without copying.
- `spongenet.parser`: `NetParser`, `unparse_u8`/`unparse_u16`/`unparse_u32`,
  `ParseResult` and `ParseError`.
- `spongenet.util`: `InternetChecksum`, `hexdump`, `timestamp_ms` and
  `get_random_generator`.
- `spongenet.address`: `Address`, an IPv4 address and port.
- Packet formats: `EthernetHeader`, `EthernetFrame`, `ARPMessage`,
  `IPv4Header`, `IPv4Datagram`, `TCPHeader` and `TCPSegment`.
- I/O: `FileDescriptor`, `UDPSocket`, `TCPSocket`, `LocalStreamSocket`,
  `local_stream_socket_pair()` and `EventLoop`.
- Adapters: `TCPConfig`, `FdAdapterConfig`, `TCPOverUDPSocketAdapter`,
  `LossyFdAdapter` and `TCPOverIPv4Adapter`.

It needs only the standard library. The I/O parts use `select.poll` and
`os.writev`, so they run on POSIX systems.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Packet formats

Each format has a `parse` class method that returns the decoded object or
raises `ParseError`. The error's `result` is a `ParseResult` saying what went
wrong, for example `BAD_CHECKSUM` or `PACKET_TOO_SHORT`; `as_string()` gives
its display name. Each format also has a `serialize` method. For frames,
datagrams and segments it returns a `BufferList` (header followed by payload);
for headers and ARP messages it returns `bytes`.

```python
from spongenet.tcp_segment import TCPSegment
from spongenet.parser import ParseError

segment = TCPSegment()
segment.header.syn = True
wire = segment.serialize(0).concatenate()

try:
    again = TCPSegment.parse(wire, 0)
except ParseError as err:
    print("bad segment:", err.result)
else:
    print(again.header.summary(), again.length_in_sequence_space())
```

`TCPSegment.serialize()` and `IPv4Datagram.serialize()` fill in the checksum;
the header classes' own `serialize()` writes the checksum field as it stands.
`IPv4Header.parse()` checks the version, header length, total length and
header checksum. `TCPHeader` equality compares every field except the ports
and the checksum.

The IPv4 pseudo-header sum comes from `IPv4Header.pseudo_cksum()`.
`TCPOverIPv4Adapter` uses it to wrap segments with `wrap_tcp_in_ip()` and to
pick out segments for its connection with `unwrap_tcp_in_ip()`, which returns
`None` for anything invalid or unrelated.

## Buffers

`Buffer` is a read-only sequence of bytes whose storage is shared between
copies; `remove_prefix()` only moves an offset. `BufferList` holds several
buffers in a row, so a header can be put in front of a payload without copying
the payload; `concatenate()` joins them into one `bytes` object and
`to_buffer()` returns a single `Buffer` (raising `ValueError` if there is more
than one piece). `BufferViewList` gives memoryviews of the pieces for
scatter-gather writes.

## Checksums and dumps

```python
from spongenet.util import InternetChecksum, hexdump

check = InternetChecksum(0)
check.add(b"\x45\x00\x00\x1c")
print(hex(check.value()))
hexdump(b"hello, world", 2)
```

`hexdump()` prints the dump to standard output and also returns it as a
string.

## I/O

`FileDescriptor` handles made with `duplicate()` share one descriptor, which
is closed when the last handle goes away or when `close()` is called; a handle
is also a context manager. `FileDescriptor` and the socket classes count their
reads and writes. `EventLoop` uses those counts to spot a callback that spins
without reading or writing: it raises `RuntimeError` in that case.

Register a callback with `EventLoop.add_rule(fd, Direction.IN or
Direction.OUT, callback, interest, cancel)`, then call
`wait_next_event(timeout_ms)` repeatedly. It returns
`EventLoopResult.SUCCESS`, `TIMEOUT`, or `EXIT` once no rule is left to poll.

`TCPOverUDPSocketAdapter` sends and receives TCP segments as UDP payloads.
While listening, the first SYN it reads sets its destination. `LossyFdAdapter`
wraps an adapter and drops each read or write with probability
`loss_rate / 65536`, using `loss_rate_dn` for reads and `loss_rate_up` for
writes from the adapter's `FdAdapterConfig`.

## What it does not do

The package does not contain a TCP connection: there is no sender, receiver,
retransmission timer or connection state machine, and nothing drives the event
loop and adapters together into a working socket. It has no access to TUN or
TAP devices, no Ethernet network interface or ARP cache, and no command-line
program.