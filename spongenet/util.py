"""Internet checksum, hexdump and small timing and randomness helpers."""

from __future__ import annotations

import os
import random
import sys
import time
from typing import Union

_PROGRAM_START = time.monotonic()


def timestamp_ms() -> int:
    """Milliseconds elapsed since this module was loaded."""
    return int((time.monotonic() - _PROGRAM_START) * 1000)


def get_random_generator() -> random.Random:
    """Return a fast pseudo-random generator seeded from the OS entropy source."""
    return random.Random(int.from_bytes(os.urandom(32), "big"))


class InternetChecksum:
    """Incremental Internet (ones'-complement) checksum.

    Evaluating it over a packet that carries a correct checksum gives 0.
    """

    def __init__(self, initial_sum: int = 0) -> None:
        self._sum = initial_sum & 0xFFFFFFFF
        self._parity = False

    def add(self, data: Union[bytes, bytearray, memoryview, object]) -> None:
        """Add bytes to the running sum; pieces may have odd lengths."""
        if isinstance(data, (bytes, bytearray)):
            raw = data
        elif isinstance(data, memoryview):
            raw = data.tobytes()
        elif isinstance(data, (int, str)):
            raise TypeError("InternetChecksum.add expects bytes")
        else:
            raw = bytes(data)  # type: ignore[call-overload]

        even, odd = sum(raw[0::2]), sum(raw[1::2])
        if self._parity:
            total = even + (odd << 8)
        else:
            total = (even << 8) + odd
        self._sum = (self._sum + total) & 0xFFFFFFFF
        if len(raw) % 2:
            self._parity = not self._parity

    def value(self) -> int:
        """The checksum, in host byte order."""
        ret = self._sum
        while ret > 0xFFFF:
            ret = (ret >> 16) + (ret & 0xFFFF)
        return ~ret & 0xFFFF


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte <= 0x7E else "."


def hexdump(data: Union[bytes, bytearray, memoryview], indent: int = 0) -> str:
    """Write a hex and ASCII dump of ``data`` to stdout and return it."""
    raw = bytes(data)
    indent_string = " " * indent
    out: list[str] = []
    chars = ""
    printed = 0
    for byte in raw:
        if printed & 0xF == 0:
            if printed != 0:
                out.append("    " + (chars or " ") + "\n")
                chars = ""
            out.append(f"{indent_string}{printed:08x}:    ")
        elif printed & 1 == 0:
            out.append(" ")
        out.append(f"{byte:02x}")
        chars += _printable(byte)
        printed += 1
    remainder = (16 - (printed & 0xF)) % 16
    out.append(" " * (2 * remainder + remainder // 2 + 4) + (chars or " "))
    out.append("\n\n")
    text = "".join(out)
    sys.stdout.write(text)
    sys.stdout.flush()
    return text