"""IPv4 datagrams: a header and a payload."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Union

from .buffer import Buffer, BufferList, BytesLike
from .ipv4_header import IPv4Header
from .parser import NetParser, ParseError, ParseResult
from .util import InternetChecksum


@dataclass
class IPv4Datagram:
    """An IPv4 header followed by its payload."""

    header: IPv4Header = field(default_factory=IPv4Header)
    payload: BufferList = field(default_factory=BufferList)

    def __post_init__(self) -> None:
        if not isinstance(self.payload, BufferList):
            self.payload = BufferList(self.payload)

    @classmethod
    def parse(cls, data: Union[Buffer, BytesLike]) -> "IPv4Datagram":
        """Parse a datagram; raises :class:`ParseError` on failure."""
        parser = NetParser(data)
        header = IPv4Header.parse(parser)
        payload = BufferList(parser.buffer)
        if len(payload) != header.payload_length():
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        parser.raise_for_error()
        return cls(header=header, payload=payload)

    def serialize(self) -> BufferList:
        """Encode the datagram, filling in the header checksum."""
        payload = self.payload if isinstance(self.payload, BufferList) else BufferList(self.payload)
        if len(payload) != self.header.payload_length():
            raise ValueError("IPv4Datagram.serialize: payload is wrong size")

        header_out = dataclasses.replace(self.header, cksum=0)
        check = InternetChecksum()
        check.add(header_out.serialize())
        header_out.cksum = check.value()

        ret = BufferList(header_out.serialize())
        ret.append(payload)
        return ret


InternetDatagram = IPv4Datagram