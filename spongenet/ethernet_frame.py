"""Ethernet frames: a header and a payload."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .buffer import Buffer, BufferList, BytesLike
from .ethernet_header import EthernetHeader
from .parser import NetParser


@dataclass
class EthernetFrame:
    """An Ethernet header followed by its payload."""

    header: EthernetHeader = field(default_factory=EthernetHeader)
    payload: BufferList = field(default_factory=BufferList)

    @classmethod
    def parse(cls, data: Union[Buffer, BytesLike]) -> "EthernetFrame":
        """Parse a frame; raises :class:`ParseError` on failure."""
        parser = NetParser(data)
        header = EthernetHeader.parse(parser)
        payload = BufferList(parser.buffer)
        parser.raise_for_error()
        return cls(header=header, payload=payload)

    def serialize(self) -> BufferList:
        """Encode the frame as header bytes followed by the payload."""
        ret = BufferList(self.header.serialize())
        ret.append(self.payload)
        return ret