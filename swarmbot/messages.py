"""Commands exchanged with controllers over WebSocket connections."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Union

import websockets
from websockets.exceptions import ConnectionClosed

from swarmbot.geometry import BlockLocation, Selection2D

_LOG = logging.getLogger(__name__)
_U64_MAX = (1 << 64) - 1
_REQUEST_PATHS = frozenset({"mine", "goto", "attack"})


@dataclass(frozen=True)
class Mine:
    """Mine the given selection, sharing the work between bots."""

    sel: Selection2D


@dataclass(frozen=True)
class GoTo:
    """Travel to the given block location."""

    location: BlockLocation


@dataclass(frozen=True)
class Attack:
    """Attack the named player."""

    name: str


@dataclass(frozen=True)
class Cancelled:
    """The command with the given id was cancelled."""

    id: int


@dataclass(frozen=True)
class Finished:
    """The command with the given id has finished."""

    id: int


CommandData = Union[Mine, GoTo, Attack, Cancelled, Finished]


@dataclass(frozen=True)
class Command:
    """A command payload tagged with an id."""

    id: int
    data: CommandData


def _u64(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U64_MAX:
        raise ValueError(f"{what} must be an unsigned 64-bit integer, got {value!r}")
    return value


def _payload_to_dict(data: CommandData) -> dict[str, Any]:
    if isinstance(data, Mine):
        return {"type": "mine", "sel": data.sel.to_dict()}
    if isinstance(data, GoTo):
        return {"type": "goto", "location": data.location.to_dict()}
    if isinstance(data, Attack):
        return {"type": "attack", "name": data.name}
    if isinstance(data, Cancelled):
        return {"type": "cancelled", "id": data.id}
    if isinstance(data, Finished):
        return {"type": "finished", "id": data.id}
    raise TypeError(f"not a command payload: {data!r}")


def _payload_from_dict(kind: str, data: dict[str, Any]) -> CommandData:
    try:
        if kind == "mine":
            return Mine(Selection2D.from_dict(data["sel"]))
        if kind == "goto":
            return GoTo(BlockLocation.from_dict(data["location"]))
        if kind == "attack":
            name = data["name"]
            if not isinstance(name, str):
                raise ValueError(f"attack name must be a string, got {name!r}")
            return Attack(name)
        if kind == "cancelled":
            return Cancelled(_u64(data["id"], "cancelled id"))
        if kind == "finished":
            return Finished(_u64(data["id"], "finished id"))
    except (KeyError, TypeError) as exc:
        raise ValueError(f"malformed {kind} command: {exc}") from exc
    raise ValueError(f"unknown command type {kind!r}")


def encode_command(command: Command) -> str:
    """Serialize a command to its JSON text form."""
    document = {"id": command.id, "data": _payload_to_dict(command.data)}
    return json.dumps(document, separators=(",", ":"))


def decode_command(text: str | bytes) -> Command:
    """Parse a command from its JSON text form."""
    document = json.loads(text)
    if not isinstance(document, dict):
        raise ValueError("command must be a JSON object")
    if "id" not in document or "data" not in document:
        raise ValueError("command needs both 'id' and 'data'")
    payload = document["data"]
    if not isinstance(payload, dict):
        raise ValueError("command data must be a JSON object")
    kind = payload.get("type")
    if not isinstance(kind, str):
        raise ValueError("command data has no type")
    return Command(_u64(document["id"], "command id"), _payload_from_dict(kind, payload))


def parse_request(text: str | bytes) -> CommandData | None:
    """Parse a controller request routed by its ``path`` field.

    Returns None for an unknown path.
    """
    value = json.loads(text)
    if not isinstance(value, dict):
        raise ValueError("invalid value: request must be a JSON object")
    if "path" not in value:
        raise ValueError("no path elem")
    path = value.pop("path")
    if not isinstance(path, str):
        raise ValueError("invalid path")
    if path not in _REQUEST_PATHS:
        _LOG.warning("invalid %s", path)
        return None
    return _payload_from_dict(path, value)


def _socket_port(server: Any) -> int:
    return next(iter(server.sockets)).getsockname()[1]


class Comm:
    """A two-way command channel over WebSockets."""

    def __init__(self) -> None:
        self._incoming: asyncio.Queue[Command] = asyncio.Queue()
        self._outgoing: asyncio.Queue[Command] = asyncio.Queue()
        self._tasks: set[asyncio.Task[None]] = set()
        self._connection: Any = None
        self._server: Any = None
        self.port: int | None = None

    @classmethod
    async def connect(cls, host: str, port: int) -> Comm:
        """Open a channel to a listening peer."""
        comm = cls()
        comm._connection = await websockets.connect(f"ws://{host}:{port}")
        comm.port = port
        comm._tasks.add(asyncio.ensure_future(comm._pump(comm._connection)))
        return comm

    @classmethod
    async def host(cls, host: str, port: int) -> Comm:
        """Listen for peers; port 0 picks a free port, stored in ``port``."""
        comm = cls()
        comm._server = await websockets.serve(comm._pump, host, port)
        comm.port = _socket_port(comm._server)
        return comm

    def send(self, command: Command) -> None:
        """Queue a command for the connected peer."""
        self._outgoing.put_nowait(command)

    async def recv(self) -> Command:
        """Wait for the next command from a peer."""
        return await self._incoming.get()

    async def close(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        if self._connection is not None:
            await self._connection.close()
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()

    async def _pump(self, connection: Any) -> None:
        reader = asyncio.ensure_future(self._read_from(connection))
        writer = asyncio.ensure_future(self._write_to(connection))
        try:
            await asyncio.wait({reader, writer}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            reader.cancel()
            writer.cancel()
            await asyncio.gather(reader, writer, return_exceptions=True)

    async def _read_from(self, connection: Any) -> None:
        try:
            async for message in connection:
                try:
                    command = decode_command(message)
                except ValueError as exc:
                    _LOG.debug("ignoring undecodable command: %s", exc)
                    continue
                self._incoming.put_nowait(command)
        except ConnectionClosed:
            return

    async def _write_to(self, connection: Any) -> None:
        while True:
            command = await self._outgoing.get()
            try:
                await connection.send(encode_command(command))
            except ConnectionClosed:
                return


class CommandReceiver:
    """Accepts controller requests on a local WebSocket port."""

    def __init__(self) -> None:
        self._pending: asyncio.Queue[CommandData] = asyncio.Queue()
        self._server: Any = None
        self.port: int | None = None

    @classmethod
    async def start(cls, port: int) -> CommandReceiver:
        """Listen on 127.0.0.1; port 0 picks a free port, stored in ``port``."""
        receiver = cls()
        receiver._server = await websockets.serve(receiver._handle, "127.0.0.1", port)
        receiver.port = _socket_port(receiver._server)
        return receiver

    async def recv(self) -> CommandData:
        """Wait for the next request."""
        return await self._pending.get()

    async def close(self) -> None:
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()

    async def _handle(self, connection: Any) -> None:
        try:
            async for message in connection:
                try:
                    payload = parse_request(message)
                except json.JSONDecodeError:
                    continue
                except ValueError as exc:
                    _LOG.warning("dropping connection after bad request: %s", exc)
                    return
                if payload is None:
                    _LOG.warning("dropping connection after invalid command")
                    return
                self._pending.put_nowait(payload)
        except ConnectionClosed:
            return