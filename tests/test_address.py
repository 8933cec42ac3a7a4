import socket

import pytest

from sponge.address import Address
from sponge.util import TaggedError


def test_numeric_address_ip_and_port():
    addr = Address("18.71.0.151", 53)
    assert addr.ip() == "18.71.0.151"
    assert addr.port() == 53
    assert addr.ip_port() == ("18.71.0.151", 53)


def test_ipv4_numeric_matches_doc_example():
    addr = Address("18.71.0.151", 53)
    assert addr.ipv4_numeric() == 0x12_47_00_97


def test_to_string():
    assert str(Address("18.71.0.151", 53)) == "18.71.0.151:53"


def test_default_port_is_zero():
    assert Address("127.0.0.1").port() == 0


def test_numeric_service_string():
    addr = Address("127.0.0.1", "8080")
    assert addr.port() == 8080
    assert addr.ip() == "127.0.0.1"


def test_from_ipv4_numeric_round_trip():
    original = Address("18.71.0.151", 53)
    rebuilt = Address.from_ipv4_numeric(original.ipv4_numeric())
    assert rebuilt.ip() == original.ip()
    assert rebuilt.port() == 0
    assert rebuilt.ipv4_numeric() == original.ipv4_numeric()


def test_equality_and_hash():
    a = Address("127.0.0.1", 9)
    b = Address.from_sockaddr(("127.0.0.1", 9))
    c = Address("127.0.0.1", 10)
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert len({a, b, c}) == 2


def test_sockaddr_is_usable_by_socket_module():
    addr = Address("127.0.0.1", 0)
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind(addr.sockaddr())
        bound = Address.from_sockaddr(sock.getsockname())
    assert bound.ip() == "127.0.0.1"
    assert bound.port() > 0


def test_bad_numeric_host_raises_tagged_error():
    with pytest.raises(TaggedError) as info:
        Address("not.an.ip.address", 80)
    assert "getaddrinfo(not.an.ip.address, 80)" in str(info.value)


def test_port_out_of_range():
    with pytest.raises(ValueError):
        Address("127.0.0.1", 70000)


def test_ipv4_numeric_on_unix_address_raises():
    addr = Address.from_sockaddr("/tmp/some.sock")
    with pytest.raises(RuntimeError):
        addr.ipv4_numeric()
    with pytest.raises(TaggedError):
        addr.ip_port()