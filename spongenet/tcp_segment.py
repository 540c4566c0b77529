"""TCP segments: a header and a payload, with checksum handling."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Union

from .buffer import Buffer, BufferList, BytesLike
from .parser import NetParser, ParseError, ParseResult
from .tcp_header import TCPHeader
from .util import InternetChecksum


@dataclass
class TCPSegment:
    """A TCP header followed by its payload."""

    header: TCPHeader = field(default_factory=TCPHeader)
    payload: Buffer = field(default_factory=Buffer)

    def __post_init__(self) -> None:
        if not isinstance(self.payload, Buffer):
            self.payload = Buffer(self.payload)

    @classmethod
    def parse(
        cls,
        data: Union[Buffer, BufferList, BytesLike],
        datagram_layer_checksum: int = 0,
    ) -> "TCPSegment":
        """Parse a segment, verifying its checksum.

        ``datagram_layer_checksum`` is the pseudo-header sum from the layer
        below. Raises :class:`ParseError` on failure.
        """
        buffer = Buffer(data.concatenate()) if isinstance(data, BufferList) else Buffer(data)

        check = InternetChecksum(datagram_layer_checksum)
        check.add(buffer.view)
        if check.value():
            raise ParseError(ParseResult.BAD_CHECKSUM)

        parser = NetParser(buffer)
        header = TCPHeader.parse(parser)
        payload = parser.buffer
        parser.raise_for_error()
        return cls(header=header, payload=payload)

    def length_in_sequence_space(self) -> int:
        """Payload length plus one each for SYN and FIN."""
        return len(self.payload) + (1 if self.header.syn else 0) + (1 if self.header.fin else 0)

    def serialize(self, datagram_layer_checksum: int = 0) -> BufferList:
        """Encode the segment, filling in the checksum over header and payload."""
        payload = self.payload if isinstance(self.payload, Buffer) else Buffer(self.payload)
        header_out = dataclasses.replace(self.header, cksum=0)

        check = InternetChecksum(datagram_layer_checksum)
        check.add(header_out.serialize())
        check.add(payload.view)
        header_out.cksum = check.value()

        ret = BufferList(header_out.serialize())
        ret.append(payload)
        return ret