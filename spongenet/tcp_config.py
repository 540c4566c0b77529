"""Configuration for TCP connections and the adapters that carry them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional

from .address import Address


def _check_u16(name: str, value: int) -> None:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{name} must fit in 16 bits, got {value}")


@dataclass
class TCPConfig:
    """Settings for a TCP sender and receiver."""

    DEFAULT_CAPACITY: ClassVar[int] = 64000
    MAX_PAYLOAD_SIZE: ClassVar[int] = 1000
    TIMEOUT_DFLT: ClassVar[int] = 1000
    MAX_RETX_ATTEMPTS: ClassVar[int] = 8

    rt_timeout: int = TIMEOUT_DFLT
    recv_capacity: int = DEFAULT_CAPACITY
    send_capacity: int = DEFAULT_CAPACITY
    fixed_isn: Optional[int] = None

    def __post_init__(self) -> None:
        _check_u16("rt_timeout", self.rt_timeout)
        if self.recv_capacity < 0 or self.send_capacity < 0:
            raise ValueError("capacities must not be negative")
        if self.fixed_isn is not None and not 0 <= self.fixed_isn <= 0xFFFFFFFF:
            raise ValueError(f"fixed_isn must fit in 32 bits, got {self.fixed_isn}")


def _any_address() -> Address:
    return Address("0.0.0.0", 0)


@dataclass
class FdAdapterConfig:
    """Addresses and loss rates for an adapter that carries TCP segments."""

    source: Address = field(default_factory=_any_address)
    destination: Address = field(default_factory=_any_address)
    loss_rate_dn: int = 0
    loss_rate_up: int = 0

    def __post_init__(self) -> None:
        _check_u16("loss_rate_dn", self.loss_rate_dn)
        _check_u16("loss_rate_up", self.loss_rate_up)