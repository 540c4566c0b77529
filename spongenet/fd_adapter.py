"""Adapters that carry TCP segments over datagram sockets."""

from __future__ import annotations

import random
from typing import Optional, Protocol

from .parser import ParseError
from .sockets import UDPSocket
from .tcp_config import FdAdapterConfig
from .tcp_segment import TCPSegment
from .util import get_random_generator


class FdAdapterBase:
    """Configuration and listening state shared by all adapters."""

    def __init__(self) -> None:
        self.config = FdAdapterConfig()
        self._listen = False

    @property
    def listening(self) -> bool:
        """Whether the adapter waits for a new connection."""
        return self._listen

    def set_listening(self, listening: bool) -> None:
        """Set the listening flag."""
        self._listen = bool(listening)

    def tick(self, ms_since_last_tick: int) -> None:
        """Called periodically as time passes; nothing to do by default."""
        return None


class TCPOverUDPSocketAdapter(FdAdapterBase):
    """Reads and writes TCP segments carried in UDP payloads."""

    def __init__(self, sock: UDPSocket) -> None:
        super().__init__()
        self._sock = sock

    @property
    def sock(self) -> UDPSocket:
        """The underlying UDP socket."""
        return self._sock

    def fileno(self) -> int:
        return self._sock.fileno()

    def read(self) -> Optional[TCPSegment]:
        """Receive a datagram and return its segment, or None if it is invalid or unrelated.

        While listening, a SYN (without RST) fixes the peer as destination
        and ends listening.
        """
        datagram = self._sock.recv()

        if not self.listening and datagram.source_address != self.config.destination:
            return None

        try:
            seg = TCPSegment.parse(datagram.payload, 0)
        except ParseError:
            return None

        if self.listening:
            if seg.header.syn and not seg.header.rst:
                self.config.destination = datagram.source_address
                self.set_listening(False)
            else:
                return None

        return seg

    def write(self, seg: TCPSegment) -> None:
        """Fill in the ports and send the segment as one UDP datagram."""
        seg.header.sport = self.config.source.port
        seg.header.dport = self.config.destination.port
        self._sock.sendto(self.config.destination, seg.serialize(0))


class _Adapter(Protocol):
    config: FdAdapterConfig

    def read(self) -> Optional[TCPSegment]: ...

    def write(self, seg: TCPSegment) -> None: ...

    def set_listening(self, listening: bool) -> None: ...

    def tick(self, ms_since_last_tick: int) -> None: ...


class LossyFdAdapter:
    """Wraps an adapter and randomly drops reads and writes.

    The drop probability is ``loss_rate / 65536`` from the adapter's config.
    """

    def __init__(self, adapter: _Adapter, rng: Optional[random.Random] = None) -> None:
        self._adapter = adapter
        self._rand = rng if rng is not None else get_random_generator()

    @property
    def adapter(self) -> _Adapter:
        """The wrapped adapter."""
        return self._adapter

    @property
    def config(self) -> FdAdapterConfig:
        """The wrapped adapter's configuration."""
        return self._adapter.config

    def fileno(self) -> int:
        return self._adapter.fileno()  # type: ignore[attr-defined]

    def _should_drop(self, uplink: bool) -> bool:
        cfg = self._adapter.config
        loss = cfg.loss_rate_up if uplink else cfg.loss_rate_dn
        return loss != 0 and self._rand.getrandbits(16) < loss

    def read(self) -> Optional[TCPSegment]:
        """Read from the wrapped adapter, possibly dropping the result."""
        ret = self._adapter.read()
        if self._should_drop(False):
            return None
        return ret

    def write(self, seg: TCPSegment) -> None:
        """Write through the wrapped adapter unless the segment is dropped."""
        if self._should_drop(True):
            return
        self._adapter.write(seg)

    def set_listening(self, listening: bool) -> None:
        self._adapter.set_listening(listening)

    def tick(self, ms_since_last_tick: int) -> None:
        self._adapter.tick(ms_since_last_tick)