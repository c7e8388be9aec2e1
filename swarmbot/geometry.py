"""Positions, displacements and directions in the block world."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar

from swarmbot.codec import ByteReader, ByteWriter

_SHORT_LOC_SCALE = 128.0 * 32.0
_I16_MIN = -(1 << 15)
_I16_MAX = (1 << 15) - 1
_I32_MIN = -(1 << 31)
_I32_MAX = (1 << 31) - 1

_LAT_LON_THRESHOLD = 1 << 25
_LAT_LON_SUB = 1 << 26
_Y_THRESHOLD = 1 << 11
_Y_SUB = 1 << 12


def _wrap_i16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value > _I16_MAX else value


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _floor_cast(value: float, low: int, high: int) -> int | None:
    if math.isnan(value) or math.isinf(value):
        return None
    floored = math.floor(value)
    if not low <= floored <= high:
        return None
    return floored


@dataclass(frozen=True)
class Change:
    """An integer step between block positions."""

    dx: int
    dy: int
    dz: int


@dataclass(frozen=True)
class Displacement:
    """A vector between two locations."""

    dx: float = 0.0
    dy: float = 0.0
    dz: float = 0.0

    EYE_HEIGHT: ClassVar[Displacement]
    EPSILON_Y: ClassVar[Displacement]

    @classmethod
    def from_change(cls, change: Change) -> Displacement:
        return cls(float(change.dx), float(change.dy), float(change.dz))

    def __add__(self, other: object) -> Displacement:
        if not isinstance(other, Displacement):
            return NotImplemented
        return Displacement(self.dx + other.dx, self.dy + other.dy, self.dz + other.dz)

    def __sub__(self, other: object) -> Displacement:
        if not isinstance(other, Displacement):
            return NotImplemented
        return self + other * -1.0

    def __neg__(self) -> Displacement:
        return self * -1.0

    def __mul__(self, factor: object) -> Displacement:
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return Displacement(self.dx * factor, self.dy * factor, self.dz * factor)

    def __getitem__(self, index: int) -> float:
        if index == 0:
            return self.dx
        if index == 1:
            return self.dy
        if index == 2:
            return self.dz
        raise IndexError(f"invalid index {index} for displacement")

    def __str__(self) -> str:
        return f"[{self.dx:.2f} {self.dy:.2f} {self.dz:.2f}]"

    def zero_if_reachable(self) -> Displacement:
        """Zero every component whose magnitude is below one half."""
        return Displacement(
            *(0.0 if abs(value) < 0.5 else value for value in (self.dx, self.dy, self.dz))
        )

    def make_dy(self, dy: float) -> Displacement:
        return replace(self, dy=dy)

    def mag(self) -> float:
        return math.sqrt(self.mag2())

    def mag2(self) -> float:
        return self.dx * self.dx + self.dy * self.dy + self.dz * self.dz

    def dot(self, other: Displacement) -> float:
        return self.dx * other.dx + self.dy * other.dy + self.dz * other.dz

    def reflect(self, normal: Displacement) -> Displacement:
        return self - normal * 2.0 * self.dot(normal)

    def normalize(self) -> Displacement:
        """Scale to unit length; a zero vector is returned unchanged."""
        mag = self.mag()
        if mag == 0.0:
            return self
        return self * (1.0 / mag)

    def cross(self, other: Displacement) -> Displacement:
        return Displacement(
            self[1] * other[2] - self[2] * other[1],
            self[2] * other[0] - self[0] * other[2],
            self[0] * other[1] - self[1] * other[0],
        )

    def has_length(self) -> bool:
        return self.dx != 0.0 or self.dy != 0.0 or self.dz != 0.0


Displacement.EYE_HEIGHT = Displacement(0.0, 1.6, 0.0)
Displacement.EPSILON_Y = Displacement(0.0, 0.01, 0.0)


@dataclass(frozen=True)
class Origin:
    """A coordinate that either replaces a value or is added to it."""

    value: float
    relative: bool

    def apply(self, value: float) -> float:
        return value + self.value if self.relative else self.value


@dataclass(frozen=True)
class LocationOrigin:
    """A location whose axes are each absolute or relative."""

    x: Origin
    y: Origin
    z: Origin

    @classmethod
    def absolute(cls, location: Location) -> LocationOrigin:
        return cls.from_flags(location, False, False, False)

    @classmethod
    def from_flags(cls, location: Location, x: bool, y: bool, z: bool) -> LocationOrigin:
        """Build from a location; a true flag makes that axis relative."""
        return cls(
            Origin(location.x, x),
            Origin(location.y, y),
            Origin(location.z, z),
        )

    @classmethod
    def from_short(cls, dx: int, dy: int, dz: int) -> LocationOrigin:
        """Build a relative move from fixed-point 16-bit deltas."""
        return cls(
            Origin(dx / _SHORT_LOC_SCALE, True),
            Origin(dy / _SHORT_LOC_SCALE, True),
            Origin(dz / _SHORT_LOC_SCALE, True),
        )


@dataclass(frozen=True)
class Location:
    """A point in the world."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: object) -> Location:
        if isinstance(other, Displacement):
            return Location(self.x + other.dx, self.y + other.dy, self.z + other.dz)
        if isinstance(other, Location):
            return Location(self.x + other.x, self.y + other.y, self.z + other.z)
        if isinstance(other, LocationOrigin):
            return self.apply_change(other)
        return NotImplemented

    def __sub__(self, other: object) -> Any:
        if isinstance(other, Location):
            return Displacement(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, Displacement):
            return Location(self.x - other.dx, self.y - other.dy, self.z - other.dz)
        return NotImplemented

    def __str__(self) -> str:
        return f"[{self.x:.2f} {self.y:.2f} {self.z:.2f}]"

    def dist2(self, other: Location) -> float:
        dx = other.x - self.x
        dy = other.y - self.y
        dz = other.z - self.z
        return dx * dx + dy * dy + dz * dz

    def apply_change(self, change: LocationOrigin) -> Location:
        """Return this location with each axis of ``change`` applied."""
        return Location(
            change.x.apply(self.x),
            change.y.apply(self.y),
            change.z.apply(self.z),
        )

    def sub_y(self, dy: float) -> Location:
        return replace(self, y=self.y - dy)

    def add_y(self, dy: float) -> Location:
        return replace(self, y=self.y + dy)

    def rounded(self) -> Location:
        """Round each axis to the nearest integer, halves away from zero."""
        return Location(
            _round_half_away(self.x), _round_half_away(self.y), _round_half_away(self.z)
        )

    def to_block(self) -> BlockLocation:
        return BlockLocation.from_floats(self.x, self.y, self.z)

    def to_chunk(self) -> ChunkLocation:
        return ChunkLocation.from_block(self.to_block())

    @classmethod
    def read(cls, reader: ByteReader) -> Location:
        return cls(reader.read_f64(), reader.read_f64(), reader.read_f64())

    @classmethod
    def read_f32(cls, reader: ByteReader) -> Location:
        return cls(reader.read_f32(), reader.read_f32(), reader.read_f32())

    def write(self, writer: ByteWriter) -> ByteWriter:
        return writer.write_f64(self.x).write_f64(self.y).write_f64(self.z)


@dataclass(frozen=True)
class Direction:
    """A view direction in degrees.

    Yaw starts at +z and turns counter-clockwise: 90 faces -x, 180 faces -z
    and 270 faces +x. It is not clamped to any range.
    """

    yaw: float = 0.0
    pitch: float = 0.0

    DOWN: ClassVar[Direction]

    def unit_vector(self) -> Displacement:
        pitch = math.radians(self.pitch)
        yaw = math.radians(self.yaw)
        x = -math.cos(math.radians(pitch)) * math.sin(yaw)
        y = -math.sin(pitch)
        z = math.cos(pitch) * math.cos(yaw)
        return Displacement(x, y, z)

    def horizontal(self) -> Direction:
        return replace(self, pitch=0.0)

    @classmethod
    def from_displacement(cls, displacement: Displacement) -> Direction:
        dx, dy, dz = displacement.dx, displacement.dy, displacement.dz
        r = math.sqrt(dx * dx + dy * dy + dz * dz)
        yaw = -math.atan2(dx, dz) / math.pi * 180.0
        if yaw < 0.0:
            yaw += 360.0
        if abs(yaw) < 0.1:
            yaw = 0.0
        pitch = math.nan if r == 0.0 else -math.asin(dy / r) / math.pi * 180.0
        return cls(yaw, pitch)

    @classmethod
    def read(cls, reader: ByteReader) -> Direction:
        return cls(reader.read_f32(), reader.read_f32())

    def write(self, writer: ByteWriter) -> ByteWriter:
        return writer.write_f32(self.yaw).write_f32(self.pitch)


Direction.DOWN = Direction(90.0, 90.0)


@dataclass(frozen=True)
class DirectionOrigin:
    """A direction whose yaw and pitch are each absolute or relative."""

    yaw: Origin
    pitch: Origin

    @classmethod
    def from_flags(cls, direction: Direction, yaw: bool, pitch: bool) -> DirectionOrigin:
        return cls(Origin(direction.yaw, yaw), Origin(direction.pitch, pitch))


class Dimension(enum.Enum):
    """A world dimension, valued by its protocol id."""

    NETHER = -1
    OVERWORLD = 0
    END = 1

    @classmethod
    def from_id(cls, value: int) -> Dimension:
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"dimension {value} is not valid") from None

    def __str__(self) -> str:
        return self.name.lower()


_FACE_OFFSETS = (
    Displacement(0.5, 0.0, 0.5),
    Displacement(0.5, 1.0, 0.5),
    Displacement(0.5, 0.5, 0.0),
    Displacement(0.5, 0.5, 1.0),
    Displacement(0.0, 0.5, 0.5),
    Displacement(1.0, 0.5, 0.5),
)


@dataclass(frozen=True, order=True)
class BlockLocation:
    """Integer block coordinates; y is a signed 16-bit value."""

    x: int = 0
    y: int = 0
    z: int = 0

    def __add__(self, other: object) -> BlockLocation:
        if not isinstance(other, BlockLocation):
            return NotImplemented
        return BlockLocation(self.x + other.x, self.y + other.y, self.z + other.z)

    def __getitem__(self, index: int) -> int:
        if index == 0:
            return self.x
        if index == 1:
            return self.y
        if index == 2:
            return self.z
        raise IndexError(f"invalid index {index} for block location")

    def __str__(self) -> str:
        return f"[{self.x}, {self.y}, {self.z}]"

    def with_axis(self, index: int, value: int) -> BlockLocation:
        """Return a copy with one axis replaced; y wraps to 16 bits."""
        if index == 0:
            return replace(self, x=value)
        if index == 1:
            return replace(self, y=_wrap_i16(value))
        if index == 2:
            return replace(self, z=value)
        raise IndexError(f"invalid index {index} for block location")

    @classmethod
    def from_floats(cls, x: float, y: float, z: float) -> BlockLocation:
        """Floor each coordinate; an unrepresentable y becomes -100."""
        bx = _floor_cast(x, _I32_MIN, _I32_MAX)
        bz = _floor_cast(z, _I32_MIN, _I32_MAX)
        if bx is None or bz is None:
            raise ValueError(f"cannot convert ({x}, {y}, {z}) to a block location")
        by = _floor_cast(y, _I16_MIN, _I16_MAX)
        return cls(bx, -100 if by is None else by, bz)

    def faces(self) -> tuple[Location, ...]:
        """The centres of the six faces of this block."""
        lowest = Location(float(self.x), float(self.y), float(self.z))
        return tuple(lowest + offset for offset in _FACE_OFFSETS)

    def below(self) -> BlockLocation:
        return replace(self, y=self.y - 1)

    def above(self) -> BlockLocation:
        return replace(self, y=self.y + 1)

    def add_y(self, dy: int) -> BlockLocation:
        return replace(self, y=self.y + dy)

    def center_bottom(self) -> Location:
        return Location(self.x + 0.5, float(self.y), self.z + 0.5)

    def true_center(self) -> Location:
        return Location(self.x + 0.5, self.y + 0.5, self.z + 0.5)

    def dist2(self, other: BlockLocation) -> float:
        dx = float(abs(self.x - other.x))
        dy = float(abs(self.y - other.y))
        dz = float(abs(self.z - other.z))
        return dx * dx + dy * dy + dz * dz

    def dist(self, other: BlockLocation) -> float:
        return math.sqrt(self.dist2(other))

    def manhattan(self, other: BlockLocation) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y) + abs(self.z - other.z)

    def to_2d(self) -> BlockLocation2D:
        return BlockLocation2D(self.x, self.z)

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BlockLocation:
        return cls(int(data["x"]), int(data["y"]), int(data["z"]))

    @classmethod
    def read(cls, reader: ByteReader) -> BlockLocation:
        return decode_position(reader.read_u64())

    def write(self, writer: ByteWriter) -> ByteWriter:
        return writer.write_u64(encode_position(self))


@dataclass(frozen=True)
class BlockLocation2D:
    """Block coordinates on the horizontal plane."""

    x: int
    z: int

    def dist2(self, other: BlockLocation2D) -> int:
        dx = abs(self.x - other.x)
        dz = abs(self.z - other.z)
        return dx * dx + dz * dz

    def to_3d(self) -> BlockLocation:
        return BlockLocation(self.x, 0, self.z)

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "z": self.z}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BlockLocation2D:
        return cls(int(data["x"]), int(data["z"]))


@dataclass(frozen=True)
class ChunkLocation:
    """The coordinates of a 16x16 column of blocks."""

    x: int
    z: int

    @classmethod
    def from_block(cls, location: BlockLocation) -> ChunkLocation:
        return cls(location.x >> 4, location.z >> 4)


@dataclass(frozen=True)
class Selection2D:
    """A rectangle on the horizontal plane between two corners."""

    from_: BlockLocation2D
    to: BlockLocation2D = field()

    def normalize(self) -> Selection2D:
        """Order the corners so that ``from_`` holds the smaller coordinates."""
        return Selection2D(
            BlockLocation2D(min(self.from_.x, self.to.x), min(self.from_.z, self.to.z)),
            BlockLocation2D(max(self.from_.x, self.to.x), max(self.from_.z, self.to.z)),
        )

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {"from": self.from_.to_dict(), "to": self.to.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Selection2D:
        return cls(
            BlockLocation2D.from_dict(data["from"]),
            BlockLocation2D.from_dict(data["to"]),
        )


def decode_position(value: int) -> BlockLocation:
    """Unpack a 64-bit packed position: 26 bits x, 12 bits y, 26 bits z."""
    value &= (1 << 64) - 1
    x = value >> 38
    y = (value >> 26) & 0xFFF
    z = value & 0x3FFFFFF
    if x >= _LAT_LON_THRESHOLD:
        x -= _LAT_LON_SUB
    if y >= _Y_THRESHOLD:
        y -= _Y_SUB
    if z >= _LAT_LON_THRESHOLD:
        z -= _LAT_LON_SUB
    return BlockLocation(x, y, z)


def encode_position(location: BlockLocation) -> int:
    """Pack a block location into the 64-bit position format."""
    return (
        ((location.x & 0x3FFFFFF) << 38)
        | ((location.y & 0xFFF) << 26)
        | (location.z & 0x3FFFFFF)
    )