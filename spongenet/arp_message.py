"""ARP messages for Ethernet and IPv4."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import ClassVar, Union

from .buffer import Buffer, BytesLike
from .ethernet_header import (
    ETHERNET_ADDRESS_LENGTH,
    EthernetHeader,
    format_ethernet_address,
)
from .parser import (
    NetParser,
    ParseError,
    ParseResult,
    unparse_u8,
    unparse_u16,
    unparse_u32,
)

_IPV4_ADDRESS_LENGTH = 4


def _format_ip(value: int) -> str:
    return str(ipaddress.IPv4Address(value & 0xFFFFFFFF))


@dataclass
class ARPMessage:
    """An ARP request or reply mapping an IPv4 address to an Ethernet address."""

    LENGTH: ClassVar[int] = 28
    TYPE_ETHERNET: ClassVar[int] = 1
    OPCODE_REQUEST: ClassVar[int] = 1
    OPCODE_REPLY: ClassVar[int] = 2

    hardware_type: int = 1
    protocol_type: int = EthernetHeader.TYPE_IPv4
    hardware_address_size: int = ETHERNET_ADDRESS_LENGTH
    protocol_address_size: int = _IPV4_ADDRESS_LENGTH
    opcode: int = 0
    sender_ethernet_address: bytes = field(default=bytes(ETHERNET_ADDRESS_LENGTH))
    sender_ip_address: int = 0
    target_ethernet_address: bytes = field(default=bytes(ETHERNET_ADDRESS_LENGTH))
    target_ip_address: int = 0

    @classmethod
    def parse(cls, data: Union[Buffer, BytesLike]) -> "ARPMessage":
        """Parse a message; raises :class:`ParseError` on failure."""
        parser = NetParser(data)
        if len(parser.buffer) < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)

        msg = cls(
            hardware_type=parser.u16(),
            protocol_type=parser.u16(),
            hardware_address_size=parser.u8(),
            protocol_address_size=parser.u8(),
            opcode=parser.u16(),
        )
        if not msg.supported():
            raise ParseError(ParseResult.UNSUPPORTED)

        msg.sender_ethernet_address = bytes(parser.u8() for _ in range(ETHERNET_ADDRESS_LENGTH))
        msg.sender_ip_address = parser.u32()
        msg.target_ethernet_address = bytes(parser.u8() for _ in range(ETHERNET_ADDRESS_LENGTH))
        msg.target_ip_address = parser.u32()
        parser.raise_for_error()
        return msg

    def supported(self) -> bool:
        """Whether this is an Ethernet/IPv4 request or reply."""
        return (
            self.hardware_type == self.TYPE_ETHERNET
            and self.protocol_type == EthernetHeader.TYPE_IPv4
            and self.hardware_address_size == ETHERNET_ADDRESS_LENGTH
            and self.protocol_address_size == _IPV4_ADDRESS_LENGTH
            and self.opcode in (self.OPCODE_REQUEST, self.OPCODE_REPLY)
        )

    def serialize(self) -> bytes:
        """Encode the message in wire format."""
        if not self.supported():
            raise ValueError(
                "ARPMessage.serialize(): unsupported field combination "
                "(must be Ethernet/IP, and request or reply)"
            )
        for name in ("sender_ethernet_address", "target_ethernet_address"):
            if len(bytes(getattr(self, name))) != ETHERNET_ADDRESS_LENGTH:
                raise ValueError(f"{name} must be {ETHERNET_ADDRESS_LENGTH} bytes")
        return b"".join(
            (
                unparse_u16(self.hardware_type),
                unparse_u16(self.protocol_type),
                unparse_u8(self.hardware_address_size),
                unparse_u8(self.protocol_address_size),
                unparse_u16(self.opcode),
                bytes(self.sender_ethernet_address),
                unparse_u32(self.sender_ip_address),
                bytes(self.target_ethernet_address),
                unparse_u32(self.target_ip_address),
            )
        )

    def __str__(self) -> str:
        if self.opcode == self.OPCODE_REQUEST:
            opcode_text = "REQUEST"
        elif self.opcode == self.OPCODE_REPLY:
            opcode_text = "REPLY"
        else:
            opcode_text = "(unknown type)"
        return (
            f"opcode={opcode_text}, "
            f"sender={format_ethernet_address(self.sender_ethernet_address)}"
            f"/{_format_ip(self.sender_ip_address)}, "
            f"target={format_ethernet_address(self.target_ethernet_address)}"
            f"/{_format_ip(self.target_ip_address)}"
        )