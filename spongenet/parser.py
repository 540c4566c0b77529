"""Network byte-order parsing and serialization of integers."""

from __future__ import annotations

import enum
from typing import Union

from .buffer import Buffer, BytesLike


class ParseResult(enum.IntEnum):
    """Outcome of parsing a datagram, segment, frame or ARP message."""

    NO_ERROR = 0
    BAD_CHECKSUM = 1
    PACKET_TOO_SHORT = 2
    WRONG_IP_VERSION = 3
    HEADER_TOO_SHORT = 4
    TRUNCATED_PACKET = 5
    UNSUPPORTED = 6


_NAMES = {
    ParseResult.NO_ERROR: "NoError",
    ParseResult.BAD_CHECKSUM: "BadChecksum",
    ParseResult.PACKET_TOO_SHORT: "PacketTooShort",
    ParseResult.WRONG_IP_VERSION: "WrongIPVersion",
    ParseResult.HEADER_TOO_SHORT: "HeaderTooShort",
    ParseResult.TRUNCATED_PACKET: "TruncatedPacket",
    ParseResult.UNSUPPORTED: "Unsupported",
}


def as_string(result: ParseResult) -> str:
    """Return the display name of a parse result."""
    return _NAMES[ParseResult(result)]


class ParseError(ValueError):
    """Raised when data cannot be parsed; ``result`` says why."""

    def __init__(self, result: ParseResult, message: str | None = None) -> None:
        self.result = ParseResult(result)
        super().__init__(message or as_string(self.result))


class NetParser:
    """Reads big-endian integers from the front of a buffer.

    Once an error is recorded, further reads return 0 and consume nothing.
    """

    def __init__(self, data: Union[Buffer, BytesLike]) -> None:
        self._buffer = Buffer(data)
        self._result = ParseResult.NO_ERROR

    @property
    def buffer(self) -> Buffer:
        """The unread remainder (a copy sharing storage)."""
        return Buffer(self._buffer)

    @property
    def result(self) -> ParseResult:
        """The error recorded so far, or ``NO_ERROR``."""
        return self._result

    @property
    def error(self) -> bool:
        """Whether an error has been recorded."""
        return self._result != ParseResult.NO_ERROR

    def set_error(self, result: ParseResult) -> None:
        """Record a parse result."""
        self._result = ParseResult(result)

    def raise_for_error(self) -> None:
        """Raise :class:`ParseError` if an error has been recorded."""
        if self.error:
            raise ParseError(self._result)

    def _check_size(self, size: int) -> None:
        if size > len(self._buffer):
            self.set_error(ParseResult.PACKET_TOO_SHORT)

    def _parse_int(self, size: int) -> int:
        self._check_size(size)
        if self.error:
            return 0
        value = int.from_bytes(self._buffer.view[:size], "big")
        self._buffer.remove_prefix(size)
        return value

    def u8(self) -> int:
        """Parse an 8-bit integer."""
        return self._parse_int(1)

    def u16(self) -> int:
        """Parse a 16-bit big-endian integer."""
        return self._parse_int(2)

    def u32(self) -> int:
        """Parse a 32-bit big-endian integer."""
        return self._parse_int(4)

    def remove_prefix(self, n: int) -> None:
        """Skip ``n`` bytes, recording an error if there are not enough."""
        self._check_size(n)
        if self.error:
            return
        self._buffer.remove_prefix(n)


def unparse_u8(value: int) -> bytes:
    """Encode the low 8 bits of ``value``."""
    return (value & 0xFF).to_bytes(1, "big")


def unparse_u16(value: int) -> bytes:
    """Encode the low 16 bits of ``value`` in network byte order."""
    return (value & 0xFFFF).to_bytes(2, "big")


def unparse_u32(value: int) -> bytes:
    """Encode the low 32 bits of ``value`` in network byte order."""
    return (value & 0xFFFFFFFF).to_bytes(4, "big")