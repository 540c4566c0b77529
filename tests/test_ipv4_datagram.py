import pytest

from spongenet.buffer import BufferList
from spongenet.ipv4_datagram import InternetDatagram, IPv4Datagram
from spongenet.ipv4_header import IPv4Header
from spongenet.parser import ParseError, ParseResult
from spongenet.util import InternetChecksum


def _datagram(payload: bytes) -> IPv4Datagram:
    header = IPv4Header(len=IPv4Header.LENGTH + len(payload), id=5, src=0x0A000001, dst=0x0A000002)
    return IPv4Datagram(header=header, payload=BufferList(payload))


def test_round_trip():
    dgram = _datagram(b"hello")
    raw = dgram.serialize().concatenate()
    parsed = IPv4Datagram.parse(raw)
    assert parsed.payload.concatenate() == b"hello"
    assert parsed.header.src == dgram.header.src
    assert parsed.header.dst == dgram.header.dst
    assert parsed.header.len == dgram.header.len


def test_serialized_header_checksum_verifies():
    raw = _datagram(b"abc").serialize().concatenate()
    check = InternetChecksum()
    check.add(raw[: IPv4Header.LENGTH])
    assert check.value() == 0


def test_serialize_keeps_payload_separate():
    out = _datagram(b"payload").serialize()
    assert len(out.buffers) == 2
    assert out.buffers[1] == b"payload"
    assert len(out.buffers[0]) == IPv4Header.LENGTH


def test_serialize_does_not_change_header():
    dgram = _datagram(b"xy")
    dgram.serialize()
    assert dgram.header.cksum == 0


def test_serialize_rejects_wrong_payload_size():
    dgram = _datagram(b"abc")
    dgram.payload = BufferList(b"abcd")
    with pytest.raises(ValueError):
        dgram.serialize()


def test_parse_rejects_truncated():
    raw = _datagram(b"hello").serialize().concatenate()
    with pytest.raises(ParseError) as info:
        IPv4Datagram.parse(raw[:-1])
    assert info.value.result == ParseResult.TRUNCATED_PACKET


def test_parse_rejects_corrupt_header():
    raw = bytearray(_datagram(b"hello").serialize().concatenate())
    raw[8] ^= 0x01
    with pytest.raises(ParseError) as info:
        IPv4Datagram.parse(bytes(raw))
    assert info.value.result == ParseResult.BAD_CHECKSUM


def test_payload_bytes_are_converted():
    dgram = IPv4Datagram(payload=b"zz")
    assert dgram.payload.concatenate() == b"zz"
    assert InternetDatagram is IPv4Datagram