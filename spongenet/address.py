"""IPv4 socket addresses and name resolution."""

from __future__ import annotations

import ipaddress
import socket
from typing import Union


class Address:
    """An IPv4 address and port, resolved with ``getaddrinfo``.

    If ``service`` is an integer, ``host`` must be a dotted-quad address and
    nothing is looked up. If it is a string, both the host name and the
    service name (e.g. ``"http"``) are resolved.
    """

    __slots__ = ("_ip", "_port")

    def __init__(self, host: str, service: Union[str, int] = 0) -> None:
        if isinstance(service, int):
            if not 0 <= service <= 0xFFFF:
                raise ValueError(f"port out of range: {service}")
            service_text = str(service)
            flags = socket.AI_NUMERICHOST | socket.AI_NUMERICSERV
        else:
            service_text = service
            flags = 0
        try:
            results = socket.getaddrinfo(host, service_text, socket.AF_INET, 0, 0, flags)
        except socket.gaierror as exc:
            raise socket.gaierror(
                exc.errno, f"getaddrinfo({host}, {service_text}): {exc.strerror}"
            ) from exc
        if not results:
            raise RuntimeError("getaddrinfo returned successfully but with no results")
        ip, port = results[0][4][:2]
        self._ip: str = ip
        self._port: int = int(port)

    @classmethod
    def from_ipv4_numeric(cls, ip_address: int) -> "Address":
        """Create an address (port 0) from a 32-bit numeric IPv4 address."""
        if not 0 <= ip_address <= 0xFFFFFFFF:
            raise ValueError(f"not a 32-bit IPv4 address: {ip_address}")
        return cls(str(ipaddress.IPv4Address(ip_address)), 0)

    def ip_port(self) -> tuple[str, int]:
        """The dotted-quad address and the numeric port."""
        return self._ip, self._port

    @property
    def ip(self) -> str:
        """The dotted-quad address."""
        return self._ip

    @property
    def port(self) -> int:
        """The numeric port."""
        return self._port

    @property
    def sockaddr(self) -> tuple[str, int]:
        """The address in the form the ``socket`` module expects."""
        return self._ip, self._port

    def ipv4_numeric(self) -> int:
        """The IPv4 address as an integer in host byte order."""
        return int(ipaddress.IPv4Address(self._ip))

    def __str__(self) -> str:
        return f"{self._ip}:{self._port}"

    def __repr__(self) -> str:
        return f"Address({self._ip!r}, {self._port})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self.ip_port() == other.ip_port()

    def __hash__(self) -> int:
        return hash(self.ip_port())