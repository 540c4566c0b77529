"""Ethernet frame header."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .parser import NetParser, ParseError, ParseResult, unparse_u16

ETHERNET_ADDRESS_LENGTH = 6

#: Ethernet broadcast address (ff:ff:ff:ff:ff:ff)
ETHERNET_BROADCAST = b"\xff" * ETHERNET_ADDRESS_LENGTH


def format_ethernet_address(address: bytes) -> str:
    """Return the colon-separated hex form of a six-byte Ethernet address."""
    return ":".join(f"{byte:02x}" for byte in bytes(address))


def _check_address(address: bytes, name: str) -> bytes:
    address = bytes(address)
    if len(address) != ETHERNET_ADDRESS_LENGTH:
        raise ValueError(f"{name} must be {ETHERNET_ADDRESS_LENGTH} bytes, got {len(address)}")
    return address


@dataclass
class EthernetHeader:
    """Destination, source and type of an Ethernet frame."""

    LENGTH: ClassVar[int] = 14
    TYPE_IPv4: ClassVar[int] = 0x800
    TYPE_ARP: ClassVar[int] = 0x806

    dst: bytes = field(default=bytes(ETHERNET_ADDRESS_LENGTH))
    src: bytes = field(default=bytes(ETHERNET_ADDRESS_LENGTH))
    type: int = 0

    def __post_init__(self) -> None:
        self.dst = _check_address(self.dst, "dst")
        self.src = _check_address(self.src, "src")

    @classmethod
    def parse(cls, parser: NetParser) -> "EthernetHeader":
        """Read a header from ``parser``; raises :class:`ParseError` on failure."""
        if len(parser.buffer) < cls.LENGTH:
            parser.set_error(ParseResult.PACKET_TOO_SHORT)
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        dst = bytes(parser.u8() for _ in range(ETHERNET_ADDRESS_LENGTH))
        src = bytes(parser.u8() for _ in range(ETHERNET_ADDRESS_LENGTH))
        frame_type = parser.u16()
        parser.raise_for_error()
        return cls(dst=dst, src=src, type=frame_type)

    def serialize(self) -> bytes:
        """Encode the header in wire format."""
        dst = _check_address(self.dst, "dst")
        src = _check_address(self.src, "src")
        return dst + src + unparse_u16(self.type)

    def __str__(self) -> str:
        if self.type == self.TYPE_IPv4:
            type_text = "IPv4"
        elif self.type == self.TYPE_ARP:
            type_text = "ARP"
        else:
            type_text = f"[unknown type {self.type:x}!]"
        return (
            f"dst={format_ethernet_address(self.dst)}, "
            f"src={format_ethernet_address(self.src)}, type={type_text}"
        )