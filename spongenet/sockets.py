"""Network sockets built on :class:`FileDescriptor`."""

from __future__ import annotations

import socket
from contextlib import contextmanager
from dataclasses import dataclass
from typing import ClassVar, Iterator, Optional, Union

from .address import Address
from .buffer import Buffer, BufferList, BufferViewList, BytesLike
from .file_descriptor import FileDescriptor

Payload = Union[BufferViewList, BufferList, Buffer, BytesLike]


def _view_list(payload: Payload) -> BufferViewList:
    if isinstance(payload, BufferViewList):
        return payload
    return BufferViewList(payload)


class Socket(FileDescriptor):
    """Base class for network sockets; used through its subclasses."""

    _DOMAIN: ClassVar[int]
    _TYPE: ClassVar[int]

    def __init__(self, fd: Union[int, FileDescriptor, None] = None) -> None:
        if not hasattr(self, "_DOMAIN"):
            raise TypeError("Socket is used through a subclass")
        if fd is None:
            super().__init__(socket.socket(self._DOMAIN, self._TYPE).detach())
            return
        super().__init__(fd)
        with self._borrow() as sock:
            if int(sock.family) != self._DOMAIN:
                raise RuntimeError("socket domain mismatch")
            if int(sock.type) != self._TYPE:
                raise RuntimeError("socket type mismatch")

    @contextmanager
    def _borrow(self) -> Iterator[socket.socket]:
        """A temporary socket object over our descriptor that does not own it."""
        sock = socket.socket(fileno=self.fd_num)
        try:
            yield sock
        finally:
            sock.detach()

    @staticmethod
    def _to_address(sockaddr: object) -> Address:
        if not isinstance(sockaddr, tuple) or len(sockaddr) < 2:
            raise ValueError(f"not an IPv4 socket address: {sockaddr!r}")
        return Address(sockaddr[0], int(sockaddr[1]))

    def bind(self, address: Address) -> None:
        """Bind the socket to a local address."""
        with self._borrow() as sock:
            sock.bind(address.sockaddr)

    def connect(self, address: Address) -> None:
        """Connect the socket to a peer address."""
        with self._borrow() as sock:
            sock.connect(address.sockaddr)

    def shutdown(self, how: int) -> None:
        """Shut down reading, writing or both (``socket.SHUT_RD`` and so on)."""
        if how not in (socket.SHUT_RD, socket.SHUT_WR, socket.SHUT_RDWR):
            raise ValueError("Socket.shutdown() called with invalid `how`")
        with self._borrow() as sock:
            sock.shutdown(how)
        if how in (socket.SHUT_RD, socket.SHUT_RDWR):
            self._register_read()
        if how in (socket.SHUT_WR, socket.SHUT_RDWR):
            self._register_write()

    def local_address(self) -> Address:
        """The address the socket is bound to."""
        with self._borrow() as sock:
            return self._to_address(sock.getsockname())

    def peer_address(self) -> Address:
        """The address of the connected peer."""
        with self._borrow() as sock:
            return self._to_address(sock.getpeername())

    def set_reuseaddr(self) -> None:
        """Allow the local address to be reused sooner (``SO_REUSEADDR``)."""
        with self._borrow() as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)


@dataclass
class ReceivedDatagram:
    """A UDP payload and the address it came from."""

    source_address: Address
    payload: bytes


class UDPSocket(Socket):
    """A UDP socket."""

    _DOMAIN = int(socket.AF_INET)
    _TYPE = int(socket.SOCK_DGRAM)

    def __init__(self, fd: Union[int, FileDescriptor, None] = None) -> None:
        super().__init__(fd)

    def recv(self, mtu: int = 65536) -> ReceivedDatagram:
        """Receive one datagram; raises RuntimeError if it is larger than ``mtu``."""
        with self._borrow() as sock:
            payload, _ancillary, flags, source = sock.recvmsg(mtu)
        if flags & socket.MSG_TRUNC:
            raise RuntimeError("recvfrom (oversized datagram)")
        self._register_read()
        return ReceivedDatagram(self._to_address(source), payload)

    def _sendmsg(self, payload: Payload, destination: Optional[Address]) -> None:
        views = _view_list(payload)
        with self._borrow() as sock:
            if destination is None:
                sent = sock.sendmsg(views.as_views())
            else:
                sent = sock.sendmsg(views.as_views(), (), 0, destination.sockaddr)
        if sent != len(views):
            raise RuntimeError("datagram payload too big for sendmsg()")
        self._register_write()

    def sendto(self, destination: Address, payload: Payload) -> None:
        """Send a datagram to ``destination``."""
        self._sendmsg(payload, destination)

    def send(self, payload: Payload) -> None:
        """Send a datagram to the connected address."""
        self._sendmsg(payload, None)


class TCPSocket(Socket):
    """A TCP socket."""

    _DOMAIN = int(socket.AF_INET)
    _TYPE = int(socket.SOCK_STREAM)

    def __init__(self, fd: Union[int, FileDescriptor, None] = None) -> None:
        super().__init__(fd)

    def listen(self, backlog: int = 16) -> None:
        """Mark the socket as listening for connections."""
        with self._borrow() as sock:
            sock.listen(backlog)

    def accept(self) -> "TCPSocket":
        """Wait for and return a new connection."""
        self._register_read()
        with self._borrow() as sock:
            conn, _peer = sock.accept()
        return TCPSocket(conn.detach())


class LocalStreamSocket(Socket):
    """A Unix-domain stream socket."""

    _DOMAIN = int(socket.AF_UNIX)
    _TYPE = int(socket.SOCK_STREAM)

    def __init__(self, fd: Union[int, FileDescriptor, None] = None) -> None:
        super().__init__(fd)


def local_stream_socket_pair() -> tuple[LocalStreamSocket, LocalStreamSocket]:
    """Return a pair of connected Unix-domain stream sockets."""
    first, second = socket.socketpair(socket.AF_UNIX, socket.SOCK_STREAM)
    return LocalStreamSocket(first.detach()), LocalStreamSocket(second.detach())