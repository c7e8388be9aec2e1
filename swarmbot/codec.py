"""Binary encoding and decoding of protocol primitives.

Multi-byte integers and floats are big-endian. Variable-length integers use
seven bits per byte with the high bit marking continuation, and hold at most
five bytes (a 32-bit value).
"""

from __future__ import annotations

import enum
import struct
from typing import Any, Callable, TypeVar

T = TypeVar("T")

_VARINT_PART = 0x7F
_VARINT_CONTINUE = 0x80
_VARINT_MAX_BYTES = 5
_U32_MASK = 0xFFFFFFFF
_USIZE_WRAP = 1 << 64


class VarIntError(ValueError):
    """A variable-length integer ran past its five-byte limit."""


class PacketState(enum.Enum):
    """The connection state a packet belongs to."""

    HANDSHAKE = "handshake"
    STATUS = "status"
    LOGIN = "login"
    PLAY = "play"

    def __str__(self) -> str:
        return self.value


def _to_i32(value: int) -> int:
    value &= _U32_MASK
    return value - (1 << 32) if value >= 1 << 31 else value


def _accumulate_varint(read_byte: Callable[[], int]) -> int:
    value = 0
    size = 0
    while True:
        byte = read_byte()
        value |= ((byte & _VARINT_PART) << (size * 7)) & _U32_MASK
        size += 1
        if size > _VARINT_MAX_BYTES:
            raise VarIntError("variable-length integer is longer than five bytes")
        if not byte & _VARINT_CONTINUE:
            return _to_i32(value)


def bitfield(byte: int) -> tuple[bool, ...]:
    """Split a byte into eight flags, most significant bit first."""
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"{byte} does not fit in a byte")
    return tuple(bool((byte >> (7 - bit)) & 1) for bit in range(8))


def format_uuid(value: int) -> str:
    """Render a 128-bit UUID as 32 lower-case hex digits."""
    return f"{value:032x}"


def parse_uuid(text: str) -> int:
    """Parse a UUID written as hex digits, hyphens allowed."""
    return int(text.replace("-", ""), 16)


async def read_varint_async(reader: Any) -> int:
    """Read a variable-length integer from an asyncio stream reader."""
    value = 0
    size = 0
    while True:
        byte = (await reader.readexactly(1))[0]
        value |= ((byte & _VARINT_PART) << (size * 7)) & _U32_MASK
        size += 1
        if size > _VARINT_MAX_BYTES:
            raise VarIntError("variable-length integer is longer than five bytes")
        if not byte & _VARINT_CONTINUE:
            return _to_i32(value)


class ByteReader:
    """A cursor over a byte string that decodes protocol values."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._data) - self._pos

    def empty(self) -> bool:
        return self._pos >= len(self._data)

    def back(self, count: int) -> None:
        """Move the cursor back by ``count`` bytes."""
        if count > self._pos:
            raise ValueError(f"cannot move back {count} bytes from position {self._pos}")
        self._pos -= count

    def _take(self, count: int) -> bytes:
        if count > len(self):
            raise EOFError(f"needed {count} bytes but only {len(self)} remain")
        chunk = self._data[self._pos : self._pos + count]
        self._pos += count
        return chunk

    def _int(self, size: int, signed: bool) -> int:
        return int.from_bytes(self._take(size), "big", signed=signed)

    def read_u8(self) -> int:
        return self._int(1, False)

    def read_i8(self) -> int:
        return self._int(1, True)

    def read_bool(self) -> bool:
        return self.read_u8() != 0

    def read_u16(self) -> int:
        return self._int(2, False)

    def read_i16(self) -> int:
        return self._int(2, True)

    def read_u32(self) -> int:
        return self._int(4, False)

    def read_i32(self) -> int:
        return self._int(4, True)

    def read_u64(self) -> int:
        return self._int(8, False)

    def read_u128(self) -> int:
        return self._int(16, False)

    def read_f32(self) -> float:
        return struct.unpack(">f", self._take(4))[0]

    def read_f64(self) -> float:
        return struct.unpack(">d", self._take(8))[0]

    def read_varint(self) -> int:
        return _accumulate_varint(self.read_u8)

    def _read_length(self) -> int:
        length = self.read_varint()
        return length if length >= 0 else length + _USIZE_WRAP

    def read_bytes(self) -> bytes:
        """Read a byte string prefixed by its variable-length size."""
        return self._take(self._read_length())

    def read_fixed(self, count: int) -> bytes:
        return self._take(count)

    def read_rest(self) -> bytes:
        return self._take(len(self))

    def read_string(self) -> str:
        return self.read_bytes().decode("utf-8")

    def read_list(self, read_item: Callable[[ByteReader], T]) -> list[T]:
        """Read items prefixed by a variable-length count."""
        length = self._read_length()
        items: list[T] = []
        while len(items) < length:
            items.append(read_item(self))
        return items

    def read_short_list(self, read_item: Callable[[ByteReader], T]) -> list[T]:
        """Read items prefixed by an unsigned 16-bit count."""
        return self.read_array(self.read_u16(), read_item)

    def read_array(self, count: int, read_item: Callable[[ByteReader], T]) -> list[T]:
        return [read_item(self) for _ in range(count)]

    def read_with_len(self, read_item: Callable[[ByteReader], T]) -> tuple[T, int]:
        """Read one value and report how many bytes it took."""
        start = self._pos
        value = read_item(self)
        return value, self._pos - start

    def read_bitfield(self) -> tuple[bool, ...]:
        return bitfield(self.read_u8())

    def read_uuid(self) -> int:
        return self.read_u128()

    def read_uuid_hyphenated(self) -> int:
        return parse_uuid(self.read_string())


class ByteWriter:
    """Accumulates encoded protocol values; every write returns the writer."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def _int(self, value: int, size: int, signed: bool) -> ByteWriter:
        self._buffer += value.to_bytes(size, "big", signed=signed)
        return self

    def write_u8(self, value: int) -> ByteWriter:
        return self._int(value, 1, False)

    def write_bool(self, value: bool) -> ByteWriter:
        return self.write_u8(1 if value else 0)

    def write_u16(self, value: int) -> ByteWriter:
        return self._int(value, 2, False)

    def write_i16(self, value: int) -> ByteWriter:
        return self._int(value, 2, True)

    def write_u64(self, value: int) -> ByteWriter:
        return self._int(value, 8, False)

    def write_u128(self, value: int) -> ByteWriter:
        return self._int(value, 16, False)

    def write_f32(self, value: float) -> ByteWriter:
        self._buffer += struct.pack(">f", value)
        return self

    def write_f64(self, value: float) -> ByteWriter:
        self._buffer += struct.pack(">d", value)
        return self

    def write_varint(self, value: int) -> ByteWriter:
        remaining = value & _U32_MASK
        while remaining & ~_VARINT_PART:
            self._buffer.append((remaining & _VARINT_PART) | _VARINT_CONTINUE)
            remaining >>= 7
        self._buffer.append(remaining)
        return self

    def write_bytes(self, data: bytes) -> ByteWriter:
        """Write a byte string prefixed by its variable-length size."""
        self.write_varint(len(data))
        return self.write_raw(data)

    def write_raw(self, data: bytes) -> ByteWriter:
        self._buffer += data
        return self

    def write_string(self, text: str) -> ByteWriter:
        return self.write_bytes(text.encode("utf-8"))

    def write_uuid(self, value: int) -> ByteWriter:
        return self.write_u128(value)

    def freeze(self) -> bytes:
        return bytes(self._buffer)