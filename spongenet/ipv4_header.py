"""IPv4 datagram header (options are not supported)."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import ClassVar

from .parser import (
    NetParser,
    ParseError,
    ParseResult,
    unparse_u8,
    unparse_u16,
    unparse_u32,
)
from .util import InternetChecksum


def _format_ip(value: int) -> str:
    return str(ipaddress.IPv4Address(value & 0xFFFFFFFF))


@dataclass
class IPv4Header:
    """The fields of an IPv4 header.

    Addresses are 32-bit integers in host byte order.
    """

    LENGTH: ClassVar[int] = 20
    DEFAULT_TTL: ClassVar[int] = 128
    PROTO_TCP: ClassVar[int] = 6

    ver: int = 4
    hlen: int = 5
    tos: int = 0
    len: int = 0
    id: int = 0
    df: bool = True
    mf: bool = False
    offset: int = 0
    ttl: int = 128
    proto: int = 6
    cksum: int = 0
    src: int = 0
    dst: int = 0

    @classmethod
    def parse(cls, parser: NetParser) -> "IPv4Header":
        """Read a header from ``parser``; raises :class:`ParseError` on failure.

        The parser must hold the whole datagram: its size has to match the
        header's total-length field, and the header checksum is verified.
        """
        original = parser.buffer
        data_size = len(original)
        if data_size < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)

        first_byte = parser.u8()
        tos = parser.u8()
        total_length = parser.u16()
        ident = parser.u16()
        fo_val = parser.u16()
        ttl = parser.u8()
        proto = parser.u8()
        cksum = parser.u16()
        src = parser.u32()
        dst = parser.u32()

        header = cls(
            ver=first_byte >> 4,
            hlen=first_byte & 0x0F,
            tos=tos,
            len=total_length,
            id=ident,
            df=bool(fo_val & 0x4000),
            mf=bool(fo_val & 0x2000),
            offset=fo_val & 0x1FFF,
            ttl=ttl,
            proto=proto,
            cksum=cksum,
            src=src,
            dst=dst,
        )

        header_size = 4 * header.hlen
        if data_size < header_size:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        if header.ver != 4:
            raise ParseError(ParseResult.WRONG_IP_VERSION)
        if header.hlen < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        if data_size != header.len:
            raise ParseError(ParseResult.TRUNCATED_PACKET)

        parser.remove_prefix(header_size - cls.LENGTH)
        parser.raise_for_error()

        check = InternetChecksum()
        check.add(original.view[:header_size])
        if check.value():
            raise ParseError(ParseResult.BAD_CHECKSUM)

        return header

    def serialize(self) -> bytes:
        """Encode the header; the checksum field is written as it stands."""
        if self.ver != 4:
            raise ValueError("wrong IP version")
        header_size = 4 * self.hlen
        if header_size < self.LENGTH:
            raise ValueError("IP header too short")

        fo_val = (0x4000 if self.df else 0) | (0x2000 if self.mf else 0) | (self.offset & 0x1FFF)
        raw = b"".join(
            (
                unparse_u8((self.ver << 4) | (self.hlen & 0x0F)),
                unparse_u8(self.tos),
                unparse_u16(self.len),
                unparse_u16(self.id),
                unparse_u16(fo_val),
                unparse_u8(self.ttl),
                unparse_u8(self.proto),
                unparse_u16(self.cksum),
                unparse_u32(self.src),
                unparse_u32(self.dst),
            )
        )
        return raw[:header_size].ljust(header_size, b"\x00")

    def payload_length(self) -> int:
        """Length of the payload: total length minus header length."""
        return (self.len - 4 * self.hlen) & 0xFFFF

    def pseudo_cksum(self) -> int:
        """The pseudo-header's contribution to a TCP checksum."""
        total = (self.src >> 16) + (self.src & 0xFFFF)
        total += (self.dst >> 16) + (self.dst & 0xFFFF)
        total += self.proto
        total += self.payload_length()
        return total & 0xFFFFFFFF

    def to_string(self) -> str:
        """All fields, one per line, numbers in hex."""
        return (
            f"IP version: {self.ver:x}\n"
            f"IP hdr len: {self.hlen:x}\n"
            f"IP tos: {self.tos:x}\n"
            f"IP dgram len: {self.len:x}\n"
            f"IP id: {self.id:x}\n"
            f"Flags: df: {str(bool(self.df)).lower()} mf: {str(bool(self.mf)).lower()}\n"
            f"Offset: {self.offset:x}\n"
            f"TTL: {self.ttl:x}\n"
            f"Protocol: {self.proto:x}\n"
            f"Checksum: {self.cksum:x}\n"
            f"Src addr: {self.src:x}\n"
            f"Dst addr: {self.dst:x}\n"
        )

    def summary(self) -> str:
        """A one-line description of the header."""
        ttl_text = "" if self.ttl >= 10 else f"ttl={self.ttl}, "
        return (
            f"IPv{self.ver:x}, len={self.len:x}, protocol={self.proto:x}, {ttl_text}"
            f"src={_format_ip(self.src)}, dst={_format_ip(self.dst)}"
        )

    def __str__(self) -> str:
        return self.to_string()