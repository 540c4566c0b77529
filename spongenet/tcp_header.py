"""TCP segment header (options are not supported)."""

from __future__ import annotations

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

_URG = 0b0010_0000
_ACK = 0b0001_0000
_PSH = 0b0000_1000
_RST = 0b0000_0100
_SYN = 0b0000_0010
_FIN = 0b0000_0001


@dataclass(eq=False)
class TCPHeader:
    """The fields of a TCP header; ``seqno`` and ``ackno`` are raw 32-bit values."""

    LENGTH: ClassVar[int] = 20

    sport: int = 0
    dport: int = 0
    seqno: int = 0
    ackno: int = 0
    doff: int = 5
    urg: bool = False
    ack: bool = False
    psh: bool = False
    rst: bool = False
    syn: bool = False
    fin: bool = False
    win: int = 0
    cksum: int = 0
    uptr: int = 0

    @classmethod
    def parse(cls, parser: NetParser) -> "TCPHeader":
        """Read a header from ``parser``; raises :class:`ParseError` on failure."""
        sport = parser.u16()
        dport = parser.u16()
        seqno = parser.u32()
        ackno = parser.u32()
        doff = parser.u8() >> 4
        flags = parser.u8()
        win = parser.u16()
        cksum = parser.u16()
        uptr = parser.u16()
        parser.raise_for_error()

        if doff < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)

        parser.remove_prefix(doff * 4 - cls.LENGTH)
        parser.raise_for_error()

        return cls(
            sport=sport,
            dport=dport,
            seqno=seqno,
            ackno=ackno,
            doff=doff,
            urg=bool(flags & _URG),
            ack=bool(flags & _ACK),
            psh=bool(flags & _PSH),
            rst=bool(flags & _RST),
            syn=bool(flags & _SYN),
            fin=bool(flags & _FIN),
            win=win,
            cksum=cksum,
            uptr=uptr,
        )

    def serialize(self) -> bytes:
        """Encode the header; the checksum field is written as it stands."""
        if self.doff < 5:
            raise ValueError("TCP header too short")
        flags = (
            (_URG if self.urg else 0)
            | (_ACK if self.ack else 0)
            | (_PSH if self.psh else 0)
            | (_RST if self.rst else 0)
            | (_SYN if self.syn else 0)
            | (_FIN if self.fin else 0)
        )
        raw = b"".join(
            (
                unparse_u16(self.sport),
                unparse_u16(self.dport),
                unparse_u32(self.seqno),
                unparse_u32(self.ackno),
                unparse_u8(self.doff << 4),
                unparse_u8(flags),
                unparse_u16(self.win),
                unparse_u16(self.cksum),
                unparse_u16(self.uptr),
            )
        )
        size = 4 * self.doff
        return raw[:size].ljust(size, b"\x00")

    def to_string(self) -> str:
        """All fields, one per line, numbers in hex."""
        flag_text = " ".join(
            f"{name}: {str(bool(value)).lower()}"
            for name, value in (
                ("urg", self.urg),
                ("ack", self.ack),
                ("psh", self.psh),
                ("rst", self.rst),
                ("syn", self.syn),
                ("fin", self.fin),
            )
        )
        return (
            f"TCP source port: {self.sport:x}\n"
            f"TCP dest port: {self.dport:x}\n"
            f"TCP seqno: {self.seqno:x}\n"
            f"TCP ackno: {self.ackno:x}\n"
            f"TCP doff: {self.doff:x}\n"
            f"Flags: {flag_text}\n"
            f"TCP winsize: {self.win:x}\n"
            f"TCP cksum: {self.cksum:x}\n"
            f"TCP uptr: {self.uptr:x}\n"
        )

    def summary(self) -> str:
        """A one-line description of the header."""
        flags = (
            ("S" if self.syn else "")
            + ("A" if self.ack else "")
            + ("R" if self.rst else "")
            + ("F" if self.fin else "")
        )
        return f"Header(flags={flags},seqno={self.seqno},ack={self.ackno},win={self.win})"

    def __str__(self) -> str:
        return self.to_string()

    def __eq__(self, other: object) -> bool:
        """Compare all fields except ports and checksum."""
        if not isinstance(other, TCPHeader):
            return NotImplemented
        return (
            self.seqno == other.seqno
            and self.ackno == other.ackno
            and self.doff == other.doff
            and self.urg == other.urg
            and self.ack == other.ack
            and self.psh == other.psh
            and self.rst == other.rst
            and self.syn == other.syn
            and self.fin == other.fin
            and self.win == other.win
            and self.uptr == other.uptr
        )

    __hash__ = None  # type: ignore[assignment]