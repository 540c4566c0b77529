"""Reference-counted file descriptor handles that track EOF and I/O counts."""

from __future__ import annotations

import errno
import os
from typing import Optional, Union

from .buffer import Buffer, BufferList, BufferViewList, BytesLike

#: Largest number of bytes a single read asks the kernel for.
MAX_READ_SIZE = 1024 * 1024

Writable = Union[BufferViewList, BufferList, Buffer, BytesLike]


class _FDWrapper:
    """Owns a kernel file descriptor and closes it when the last handle goes away."""

    __slots__ = ("fd", "eof", "closed", "read_count", "write_count")

    def __init__(self, fd: int) -> None:
        if fd < 0:
            raise ValueError(f"invalid fd number:{fd}")
        self.fd = fd
        self.eof = False
        self.closed = False
        self.read_count = 0
        self.write_count = 0

    def close(self) -> None:
        if self.closed:
            raise OSError(errno.EBADF, "close: file descriptor already closed")
        os.close(self.fd)
        self.eof = True
        self.closed = True

    def __del__(self) -> None:
        if getattr(self, "closed", True):
            return
        try:
            self.close()
        except OSError:
            pass


class FileDescriptor:
    """A handle on a kernel file descriptor.

    Handles made with :meth:`duplicate` (or by passing another handle to the
    constructor) share the descriptor and its EOF, closed and counter state.
    The descriptor is closed when the last handle is discarded.
    """

    def __init__(self, fd: Union[int, "FileDescriptor"]) -> None:
        if isinstance(fd, FileDescriptor):
            self._internal_fd = fd._internal_fd
        elif isinstance(fd, bool) or not isinstance(fd, int):
            raise TypeError("FileDescriptor expects an int or a FileDescriptor")
        else:
            self._internal_fd = _FDWrapper(fd)

    def _register_read(self) -> None:
        self._internal_fd.read_count += 1

    def _register_write(self) -> None:
        self._internal_fd.write_count += 1

    def read(self, limit: Optional[int] = None) -> bytes:
        """Read up to ``limit`` bytes (at most 1 MiB per call); fewer may be returned."""
        if limit is not None and limit < 0:
            raise ValueError("read limit must not be negative")
        size_to_read = MAX_READ_SIZE if limit is None else min(MAX_READ_SIZE, limit)
        data = os.read(self.fd_num, size_to_read)
        if size_to_read > 0 and not data:
            self._internal_fd.eof = True
        if len(data) > size_to_read:
            raise RuntimeError("read() read more than requested")
        self._register_read()
        return data

    def write(self, data: Writable, write_all: bool = True) -> int:
        """Write ``data``; with ``write_all`` keep writing until all of it is out.

        Returns the number of bytes written.
        """
        if isinstance(data, BufferViewList):
            views = BufferViewList(bytes(data))
        else:
            views = BufferViewList(data)

        total = 0
        while True:
            remaining = len(views)
            written = os.writev(self.fd_num, views.as_views())
            if written == 0 and remaining != 0:
                raise RuntimeError("write returned 0 given non-empty input buffer")
            if written > remaining:
                raise RuntimeError("write wrote more than length of input buffer")
            self._register_write()
            views.remove_prefix(written)
            total += written
            if not (write_all and len(views)):
                return total

    def close(self) -> None:
        """Close the underlying descriptor."""
        self._internal_fd.close()

    def duplicate(self) -> "FileDescriptor":
        """Return another handle sharing this descriptor."""
        return FileDescriptor(self)

    def set_blocking(self, blocking_state: bool) -> None:
        """Put the descriptor in blocking (True) or non-blocking (False) mode."""
        os.set_blocking(self.fd_num, bool(blocking_state))

    def fileno(self) -> int:
        """The descriptor number, for use with ``select`` and friends."""
        return self._internal_fd.fd

    @property
    def fd_num(self) -> int:
        """The descriptor number."""
        return self._internal_fd.fd

    @property
    def eof(self) -> bool:
        """Whether a read has hit end of file."""
        return self._internal_fd.eof

    @property
    def closed(self) -> bool:
        """Whether the descriptor has been closed."""
        return self._internal_fd.closed

    @property
    def read_count(self) -> int:
        """Number of reads performed on the descriptor."""
        return self._internal_fd.read_count

    @property
    def write_count(self) -> int:
        """Number of writes performed on the descriptor."""
        return self._internal_fd.write_count

    def __enter__(self) -> "FileDescriptor":
        return self

    def __exit__(self, *args: object) -> None:
        if not self.closed:
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"{type(self).__name__}(fd={self.fd_num}, {state})"