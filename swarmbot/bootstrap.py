"""Server addresses and the user and proxy lists bots start from."""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator

import dns.asyncresolver
import dns.exception
import dns.resolver

_LOG = logging.getLogger(__name__)
_U32_MAX = (1 << 32) - 1
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class Address:
    """A host and port to connect to."""

    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class CSVUser:
    """An account listed in the users file."""

    email: str
    password: str


@dataclass(frozen=True)
class Proxy:
    """A SOCKS5 proxy listed in the proxies file."""

    host: str
    port: int
    user: str
    password: str

    def address(self) -> str:
        return f"{self.host}:{self.port}"


def _records(file: Iterable[str], width: int) -> Iterator[tuple[int, list[str]]]:
    for line_no, row in enumerate(csv.reader(file, delimiter=":"), start=1):
        if not row:
            continue
        if len(row) != width:
            raise ValueError(f"line {line_no}: expected {width} fields, found {len(row)}")
        yield line_no, row


def _parse_u32(text: str, line_no: int) -> int:
    if not _UNSIGNED_RE.fullmatch(text) or int(text) > _U32_MAX:
        raise ValueError(f"line {line_no}: invalid port {text!r}")
    return int(text)


def read_users(file: Iterable[str]) -> list[CSVUser]:
    """Read ``email:password`` lines."""
    return [CSVUser(email, secret) for _, (email, secret) in _records(file, 2)]


def read_proxies(file: Iterable[str]) -> list[Proxy]:
    """Read ``host:port:user:pass`` lines."""
    return [
        Proxy(host, _parse_u32(port, line_no), user, secret)
        for line_no, (host, port, user, secret) in _records(file, 4)
    ]


async def normalize_address(host: str, port: int) -> Address:
    """Resolve the server's SRV record, falling back to the given address."""
    _LOG.debug("performing srv lookup")
    try:
        answer = await dns.asyncresolver.resolve(f"_minecraft._tcp.{host}", "SRV")
        record = next(iter(answer))
    except (dns.exception.DNSException, StopIteration):
        return Address(host, port)
    return Address(record.target.to_unicode(), int(record.port))