import pytest

from spongenet.address import Address
from spongenet.tcp_config import FdAdapterConfig, TCPConfig


def test_tcp_config_defaults_follow_class_constants():
    cfg = TCPConfig()
    assert cfg.rt_timeout == TCPConfig.TIMEOUT_DFLT
    assert cfg.recv_capacity == TCPConfig.DEFAULT_CAPACITY
    assert cfg.send_capacity == TCPConfig.DEFAULT_CAPACITY
    assert cfg.fixed_isn is None


def test_tcp_config_documented_values():
    assert TCPConfig().recv_capacity == 64000
    assert TCPConfig().rt_timeout == 1000


def test_tcp_config_accepts_custom_values():
    cfg = TCPConfig(rt_timeout=100, fixed_isn=1 << 31)
    assert cfg.rt_timeout == 100
    assert cfg.fixed_isn == 1 << 31


@pytest.mark.parametrize(
    "kwargs",
    [
        {"rt_timeout": 1 << 16},
        {"rt_timeout": -1},
        {"recv_capacity": -1},
        {"send_capacity": -1},
        {"fixed_isn": 1 << 32},
        {"fixed_isn": -1},
    ],
)
def test_tcp_config_rejects_out_of_range(kwargs):
    with pytest.raises(ValueError):
        TCPConfig(**kwargs)


def test_fd_adapter_config_defaults():
    cfg = FdAdapterConfig()
    assert cfg.source == Address("0.0.0.0", 0)
    assert cfg.destination == Address("0.0.0.0", 0)
    assert (cfg.loss_rate_dn, cfg.loss_rate_up) == (0, 0)


def test_fd_adapter_config_instances_are_independent():
    first, second = FdAdapterConfig(), FdAdapterConfig()
    first.destination = Address("127.0.0.1", 80)
    assert second.destination == Address("0.0.0.0", 0)


@pytest.mark.parametrize("kwargs", [{"loss_rate_dn": 1 << 16}, {"loss_rate_up": -1}])
def test_fd_adapter_config_rejects_bad_loss_rate(kwargs):
    with pytest.raises(ValueError):
        FdAdapterConfig(**kwargs)