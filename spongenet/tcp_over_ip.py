"""Conversion between TCP segments and the IPv4 datagrams that carry them."""

from __future__ import annotations

import ipaddress
from typing import Optional

from .address import Address
from .fd_adapter import FdAdapterBase
from .ipv4_datagram import IPv4Datagram
from .ipv4_header import IPv4Header
from .parser import ParseError
from .tcp_segment import TCPSegment


def _dotted(value: int) -> str:
    return str(ipaddress.IPv4Address(value & 0xFFFFFFFF))


class TCPOverIPv4Adapter(FdAdapterBase):
    """Wraps TCP segments in IPv4 datagrams and unwraps those for this connection."""

    def unwrap_tcp_in_ip(self, ip_dgram: IPv4Datagram) -> Optional[TCPSegment]:
        """Return the TCP segment in ``ip_dgram``, or None if invalid or unrelated.

        While listening, a SYN (without RST) fixes both addresses and the
        peer's port, and ends listening.
        """
        header = ip_dgram.header
        if not self.listening and header.dst != self.config.source.ipv4_numeric():
            return None
        if not self.listening and header.src != self.config.destination.ipv4_numeric():
            return None
        if header.proto != IPv4Header.PROTO_TCP:
            return None

        try:
            seg = TCPSegment.parse(ip_dgram.payload, header.pseudo_cksum())
        except ParseError:
            return None

        if seg.header.dport != self.config.source.port:
            return None

        if self.listening:
            if seg.header.syn and not seg.header.rst:
                self.config.source = Address(_dotted(header.dst), self.config.source.port)
                self.config.destination = Address(_dotted(header.src), seg.header.sport)
                self.set_listening(False)
            else:
                return None

        if seg.header.sport != self.config.destination.port:
            return None

        return seg

    def wrap_tcp_in_ip(self, seg: TCPSegment) -> IPv4Datagram:
        """Set the ports of ``seg`` and wrap it in an IPv4 datagram."""
        seg.header.sport = self.config.source.port
        seg.header.dport = self.config.destination.port

        ip_dgram = IPv4Datagram()
        ip_dgram.header.src = self.config.source.ipv4_numeric()
        ip_dgram.header.dst = self.config.destination.ipv4_numeric()
        ip_dgram.header.len = (
            ip_dgram.header.hlen * 4 + seg.header.doff * 4 + len(seg.payload)
        )
        ip_dgram.payload = seg.serialize(ip_dgram.header.pseudo_cksum())
        return ip_dgram