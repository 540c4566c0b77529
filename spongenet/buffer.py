"""Shared byte buffers that can cheaply discard bytes from the front."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


class Buffer:
    """A read-only byte string whose storage is shared between copies.

    Dropping a prefix only moves an offset; the underlying bytes are never
    copied or modified.
    """

    __slots__ = ("_storage", "_offset")

    def __init__(self, data: Union["Buffer", BytesLike] = b"") -> None:
        if isinstance(data, Buffer):
            self._storage = data._storage
            self._offset = data._offset
        elif isinstance(data, str):
            raise TypeError("Buffer expects bytes, not str")
        else:
            self._storage = bytes(data)
            self._offset = 0

    @property
    def view(self) -> memoryview:
        """A zero-copy view of the remaining bytes."""
        return memoryview(self._storage)[self._offset:]

    def at(self, n: int) -> int:
        """Return the byte at position ``n``."""
        if not 0 <= n < len(self):
            raise IndexError(f"Buffer index {n} out of range")
        return self._storage[self._offset + n]

    def copy(self) -> bytes:
        """Return the remaining bytes as a new ``bytes`` object."""
        return self._storage[self._offset:]

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes."""
        if n < 0 or n > len(self):
            raise IndexError("Buffer.remove_prefix")
        self._offset += n
        if self._offset == len(self._storage):
            self._storage = b""
            self._offset = 0

    def __len__(self) -> int:
        return len(self._storage) - self._offset

    def __bytes__(self) -> bytes:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Buffer):
            return self.view == other.view
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self.view == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Buffer({self.copy()!r})"


class BufferList:
    """A discontiguous byte string made of a sequence of :class:`Buffer` objects.

    Used to prepend headers to a payload without copying the payload.
    """

    def __init__(self, data: Union["BufferList", Buffer, BytesLike, None] = None) -> None:
        self._buffers: deque[Buffer] = deque()
        if data is None:
            return
        if isinstance(data, BufferList):
            self._buffers.extend(Buffer(buf) for buf in data._buffers)
        else:
            self._buffers.append(Buffer(data))

    @property
    def buffers(self) -> tuple[Buffer, ...]:
        """The underlying buffers, front first."""
        return tuple(self._buffers)

    def append(self, other: Union["BufferList", Buffer, BytesLike]) -> None:
        """Append another buffer list (or anything a buffer list can be made from)."""
        if not isinstance(other, BufferList):
            other = BufferList(other)
        self._buffers.extend(Buffer(buf) for buf in other._buffers)

    def to_buffer(self) -> Buffer:
        """Return the contents as a single :class:`Buffer`.

        Raises ValueError unless the list holds at most one buffer.
        """
        if not self._buffers:
            return Buffer()
        if len(self._buffers) == 1:
            return Buffer(self._buffers[0])
        raise ValueError(
            "BufferList: use concatenate() to combine a multi-Buffer BufferList into one Buffer"
        )

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across buffers."""
        if n < 0:
            raise IndexError("BufferList.remove_prefix")
        while n > 0:
            if not self._buffers:
                raise IndexError("BufferList.remove_prefix")
            front = self._buffers[0]
            if n < len(front):
                front.remove_prefix(n)
                n = 0
            else:
                n -= len(front)
                self._buffers.popleft()

    def concatenate(self) -> bytes:
        """Return all bytes joined into one ``bytes`` object."""
        return b"".join(buf.view for buf in self._buffers)

    def __len__(self) -> int:
        return sum(len(buf) for buf in self._buffers)

    def __bytes__(self) -> bytes:
        return self.concatenate()

    def __iter__(self) -> Iterator[Buffer]:
        return iter(self._buffers)

    def __repr__(self) -> str:
        return f"BufferList({list(self._buffers)!r})"


class BufferViewList:
    """A non-owning view over a discontiguous byte string."""

    def __init__(self, data: Union[BufferList, Buffer, BytesLike]) -> None:
        self._views: deque[memoryview] = deque()
        if isinstance(data, BufferList):
            self._views.extend(buf.view for buf in data)
        elif isinstance(data, Buffer):
            self._views.append(data.view)
        elif isinstance(data, str):
            raise TypeError("BufferViewList expects bytes, not str")
        else:
            self._views.append(memoryview(data).cast("B"))

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across views."""
        if n < 0:
            raise IndexError("BufferViewList.remove_prefix")
        while n > 0:
            if not self._views:
                raise IndexError("BufferViewList.remove_prefix")
            front = self._views[0]
            if n < len(front):
                self._views[0] = front[n:]
                n = 0
            else:
                n -= len(front)
                self._views.popleft()

    def as_views(self) -> list[memoryview]:
        """Return the pieces as memoryviews, suitable for ``os.writev`` or ``sendmsg``."""
        return list(self._views)

    def __len__(self) -> int:
        return sum(len(view) for view in self._views)

    def __bytes__(self) -> bytes:
        return b"".join(self._views)