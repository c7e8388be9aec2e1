import io
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import dns.name
import dns.resolver
import pytest

from swarmbot.bootstrap import (
    Address,
    CSVUser,
    Proxy,
    normalize_address,
    read_proxies,
    read_users,
)


def test_read_users():
    password = "password"
    source = io.StringIO(f"a@example.com:{password}\n\nb@example.com:{password}\n")
    users = read_users(source)
    assert users == [
        CSVUser("a@example.com", password),
        CSVUser("b@example.com", password),
    ]


def test_read_users_wrong_field_count():
    with pytest.raises(ValueError):
        read_users(io.StringIO("a@example.com\n"))


def test_read_proxies():
    password = "password"
    proxies = read_proxies(io.StringIO(f"10.0.0.1:1080:user:{password}\n"))
    assert proxies == [Proxy("10.0.0.1", 1080, "user", password)]
    assert proxies[0].address() == f"{proxies[0].host}:{proxies[0].port}"


@pytest.mark.parametrize("port", ["abc", "-1", "99999999999", "1_0"])
def test_read_proxies_bad_port(port):
    with pytest.raises(ValueError):
        read_proxies(io.StringIO(f"10.0.0.1:{port}:user:secret\n"))


def test_address_str():
    address = Address("example.com", 25565)
    assert str(address) == f"{address.host}:{address.port}"


@pytest.mark.asyncio
async def test_normalize_address_uses_srv_record():
    record = SimpleNamespace(port=25566, target=dns.name.from_text("mc.example.com"))
    resolver = AsyncMock(return_value=[record])
    with patch("dns.asyncresolver.resolve", new=resolver):
        result = await normalize_address("example.com", 25565)
    resolver.assert_awaited_once_with("_minecraft._tcp.example.com", "SRV")
    assert result == Address("mc.example.com.", 25566)


@pytest.mark.asyncio
async def test_normalize_address_falls_back():
    resolver = AsyncMock(side_effect=dns.resolver.NXDOMAIN())
    with patch("dns.asyncresolver.resolve", new=resolver):
        result = await normalize_address("example.com", 25565)
    assert result == Address("example.com", 25565)