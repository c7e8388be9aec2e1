"""Block states, kinds and the static block table."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from os import PathLike
from typing import Any, ClassVar, Iterable, Mapping, Union

_PathArg = Union[str, "PathLike[str]"]


class SimpleType(enum.IntEnum):
    """A coarse classification of a block for movement, valued by its id."""

    SOLID = 0
    WATER = 1
    AVOID = 2
    WALK_THROUGH = 3


class Material(enum.Enum):
    """The material a block is made of."""

    GENERIC = "generic"
    ROCK = "rock"
    DIRT = "dirt"
    WOOD = "wood"
    PLANT = "plant"
    WEB = "web"
    WOOL = "wool"


@dataclass(frozen=True)
class Block:
    """Static data about one block id."""

    id: int
    hardness: float | None = None
    harvest_tools: tuple[int, ...] = ()
    material: Material = Material.GENERIC

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> Block:
        """Build from one entry of a block table in JSON form."""
        tools = raw.get("harvestTools") or {}
        material = raw.get("material")
        hardness = raw.get("hardness")
        return cls(
            id=int(raw["id"]),
            hardness=None if hardness is None else float(hardness),
            harvest_tools=tuple(int(tool) for tool, usable in tools.items() if usable),
            material=Material.GENERIC if material is None else Material(material),
        )


class BlockData:
    """Lookup of block data by id and of which item ids are food."""

    def __init__(self, blocks: Iterable[Block], foods: Iterable[int]) -> None:
        self._blocks = {block.id: block for block in blocks}
        self._foods = frozenset(foods)

    def by_id(self, block_id: int) -> Block | None:
        return self._blocks.get(block_id)

    def is_food(self, item_id: int) -> bool:
        return item_id in self._foods

    @classmethod
    def load(
        cls, blocks_path: _PathArg = "blocks.json", foods_path: _PathArg = "foods.json"
    ) -> BlockData:
        """Read the block and food tables from JSON files."""
        with open(blocks_path, encoding="utf-8") as handle:
            raw_blocks = json.load(handle)
        with open(foods_path, encoding="utf-8") as handle:
            raw_foods = json.load(handle)
        return cls(
            (Block.from_raw(raw) for raw in raw_blocks),
            (int(food["id"]) for food in raw_foods),
        )


@dataclass(frozen=True)
class BlockKind:
    """A block id without its metadata."""

    id: int = 0

    DEFAULT_SLIP: ClassVar[float] = 0.6
    LADDER: ClassVar[BlockKind]
    LEAVES: ClassVar[BlockKind]
    FLOWING_WATER: ClassVar[BlockKind]
    STONE: ClassVar[BlockKind]
    DIRT: ClassVar[BlockKind]
    GLASS: ClassVar[BlockKind]

    def data(self, blocks: BlockData) -> Block:
        block = blocks.by_id(self.id)
        if block is None:
            raise KeyError(f"no block for id {self.id}")
        return block

    def hardness(self, blocks: BlockData) -> float | None:
        return self.data(blocks).hardness

    def throw_away_block(self) -> bool:
        """Whether blocks of this kind may be used up freely (cobblestone)."""
        return self.id == 4

    def mineable(self, blocks: BlockData) -> bool:
        if self.id == 0:
            return False
        hardness = self.hardness(blocks)
        return hardness is not None and hardness < 100.0

    def slip(self) -> float:
        if self.id == 266:
            return 0.989
        if self.id in (79, 174, 212):
            return 0.98
        if self.id == 37:
            return 0.8
        return self.DEFAULT_SLIP


BlockKind.LADDER = BlockKind(65)
BlockKind.LEAVES = BlockKind(18)
BlockKind.FLOWING_WATER = BlockKind(8)
BlockKind.STONE = BlockKind(1)
BlockKind.DIRT = BlockKind(3)
BlockKind.GLASS = BlockKind(20)


def _ids(*parts: int | range) -> frozenset[int]:
    ids: set[int] = set()
    for part in parts:
        if isinstance(part, range):
            ids.update(part)
        else:
            ids.add(part)
    return frozenset(ids)


_FULL_BLOCK_IDS = _ids(
    range(1, 6), 7, range(12, 26), 29, 33, 35, range(41, 44), range(45, 50), 52,
    range(56, 59), range(60, 63), 73, 74, range(78, 81), 82, 84, 86, 87, 89, 91, 95,
    97, range(98, 101), 103, 110, 112, 118, 121, range(123, 126), 129, 133,
    range(137, 139), 155, 159, 161, 162, 165, 166, range(168, 171), range(172, 175),
    179, 181, range(199, 203), 204, 206, range(208, 213), range(214, 256),
)

# 65 is a ladder; it is climbed like water.
_WATER_IDS = frozenset({8, 9, 65})

_NO_MOTION_EFFECT_IDS = _ids(
    0, 6, 27, 28, 31, 38, 37, 39, 40, 50, 59, 66, 68, 69, 70, 72, 75, 76, 77, 83, 90,
    104, 105, 106, 115, 119, range(175, 178),
)


@dataclass(frozen=True)
class BlockState:
    """A block id and its four bits of metadata packed into one integer."""

    value: int = 0

    AIR: ClassVar[BlockState]
    WATER: ClassVar[BlockState]
    STONE: ClassVar[BlockState]

    @classmethod
    def from_parts(cls, block_id: int, data: int) -> BlockState:
        return cls((block_id << 4) + data)

    def id(self) -> int:
        return self.value >> 4

    def kind(self) -> BlockKind:
        return BlockKind(self.id())

    def metadata(self) -> int:
        return self.value & 0b1111

    def simple_type(self) -> SimpleType:
        if self.full_block():
            return SimpleType.SOLID
        if self.is_water():
            return SimpleType.WATER
        if self.walk_through():
            return SimpleType.WALK_THROUGH
        return SimpleType.AVOID

    def full_block(self) -> bool:
        return self.id() in _FULL_BLOCK_IDS

    def is_water(self) -> bool:
        return self.id() in _WATER_IDS

    def walk_through(self) -> bool:
        return self.is_water() or self.no_motion_effect()

    def no_motion_effect(self) -> bool:
        return self.id() in _NO_MOTION_EFFECT_IDS

    def __repr__(self) -> str:
        return f"{self.value >> 4}:{self.value % 16}"


BlockState.AIR = BlockState(0)
BlockState.WATER = BlockState(9)
BlockState.STONE = BlockState(16)


@dataclass(frozen=True)
class BlockApprox:
    """A block that is either known exactly or only estimated by type."""

    state: BlockState | None = None
    estimate_type: SimpleType | None = field(default=None)

    AIR: ClassVar[BlockApprox]

    @classmethod
    def realized(cls, state: BlockState) -> BlockApprox:
        return cls(state=state)

    @classmethod
    def estimate(cls, simple_type: SimpleType) -> BlockApprox:
        return cls(estimate_type=simple_type)

    def s_type(self) -> SimpleType:
        if self.state is not None:
            return self.state.simple_type()
        if self.estimate_type is None:
            raise ValueError("block approximation holds neither a state nor a type")
        return self.estimate_type

    def as_real(self) -> BlockState:
        if self.state is None:
            raise ValueError("block was not realized")
        return self.state

    def is_solid(self) -> bool:
        return self.s_type() == SimpleType.SOLID

    def is_walkable(self) -> bool:
        return self.s_type() == SimpleType.WALK_THROUGH


BlockApprox.AIR = BlockApprox.estimate(SimpleType.WALK_THROUGH)


@dataclass(frozen=True)
class Enchantment:
    """An enchantment on an item."""

    lvl: int
    id: int

    def efficiency(self) -> int | None:
        """The level if this is the efficiency enchantment, else None."""
        return self.lvl if self.id == 32 else None