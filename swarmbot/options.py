"""Command-line options for starting the bots."""

from __future__ import annotations

import argparse
import re
from dataclasses import dataclass
from typing import Callable, Sequence

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class Options:
    """Settings given on the command line."""

    host: str
    load: bool = False
    count: int = 1
    proxy: bool = False
    port: int = 25565
    ws_port: int = 8080
    delay_ms: int = 500
    users_file: str = "users.csv"
    proxies_file: str = "proxies.csv"
    version: int = 340


def _unsigned(bits: int) -> Callable[[str], int]:
    limit = 1 << bits

    def parse(text: str) -> int:
        if not _UNSIGNED_RE.fullmatch(text) or int(text) >= limit:
            raise argparse.ArgumentTypeError(
                f"{text!r} is not an unsigned {bits}-bit integer"
            )
        return int(text)

    return parse


def _parser() -> argparse.ArgumentParser:
    defaults = Options(host="")
    parser = argparse.ArgumentParser(prog="swarmbot")
    parser.add_argument("host")
    parser.add_argument("--load", action="store_true")
    parser.add_argument("-c", "--count", type=_unsigned(64), default=defaults.count)
    parser.add_argument("-p", dest="proxy", action="store_true")
    parser.add_argument("--port", type=_unsigned(16), default=defaults.port)
    parser.add_argument("--ws-port", type=_unsigned(16), default=defaults.ws_port)
    parser.add_argument("-d", "--delay-ms", type=_unsigned(64), default=defaults.delay_ms)
    parser.add_argument("--users-file", default=defaults.users_file)
    parser.add_argument("--proxies-file", default=defaults.proxies_file)
    parser.add_argument("-v", "--version", type=_unsigned(64), default=defaults.version)
    return parser


def parse_options(argv: Sequence[str] | None = None) -> Options:
    """Parse the arguments; invalid input exits with a usage message."""
    namespace = _parser().parse_args(argv)
    return Options(**vars(namespace))