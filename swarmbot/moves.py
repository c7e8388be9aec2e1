"""The moves a player can make from one block position to the next."""

from __future__ import annotations

import enum
from typing import Protocol

from swarmbot.blocks import SimpleType
from swarmbot.geometry import BlockLocation, Change
from swarmbot.grid import CenteredArray
from swarmbot.nodes import MoveNode, PathConfig
from swarmbot.search import Neighbor

MAX_FALL = 3

_PARKOUR_RADIUS = 4
_MIN_PARKOUR_RAD = 1.1
_MAX_PARKOUR_RAD = 4.5

_PASSABLE = (SimpleType.WALK_THROUGH, SimpleType.WATER)


class BlockWorld(Protocol):
    """A world that can classify the block at a location."""

    def get_block_simple(self, location: BlockLocation) -> SimpleType | None:
        """The block's type, or None where the world is not loaded."""


class CardinalDirection(enum.Enum):
    """A horizontal direction, valued by its unit step."""

    NORTH = Change(1, 0, 0)
    SOUTH = Change(-1, 0, 0)
    EAST = Change(0, 0, -1)
    WEST = Change(0, 0, 1)

    def unit_change(self) -> Change:
        return self.value


class _Cell(enum.Enum):
    OPEN = enum.auto()
    CLOSED = enum.auto()


def _require(world: BlockWorld, location: BlockLocation) -> SimpleType:
    block = world.get_block_simple(location)
    if block is None:
        raise LookupError(f"block at {location} is not loaded")
    return block


def drop_y(start: BlockLocation, world: BlockWorld) -> int | None:
    """The y of the block a fall from ``start`` lands on, or None if unsafe."""
    if start.y < 2:
        return None
    travelled = 1
    for y in range(start.y - 2, -1, -1):
        block = _require(world, BlockLocation(start.x, y, start.z))
        if block == SimpleType.SOLID:
            return y if travelled <= MAX_FALL else None
        if block == SimpleType.WATER:
            return y
        if block == SimpleType.AVOID:
            return None
        travelled += 1
    return None


def _close_behind(open_cells: CenteredArray[_Cell], block_dx: int, block_dz: int) -> None:
    radius = _PARKOUR_RADIUS

    def update(sign_x: int, sign_z: int) -> None:
        increments = radius - max(abs(block_dx), abs(block_dz)) + 1
        for inc in range(increments):
            dx = block_dx + inc * sign_x
            dz = block_dz + inc * sign_z
            open_cells[(dx, dz)] = _Cell.CLOSED
            if abs(dx) < radius:
                open_cells[(dx + sign_x, dz)] = _Cell.CLOSED
            if abs(dz) < radius:
                open_cells[(dx, dz + sign_z)] = _Cell.CLOSED

    sign_x = (block_dx > 0) - (block_dx < 0)
    sign_z = (block_dz > 0) - (block_dz < 0)
    if block_dx == 0:
        for side in (-1, 0, 1):
            update(side, sign_z)
    elif block_dz == 0:
        for side in (-1, 0, 1):
            update(sign_x, side)
    else:
        update(sign_x, sign_z)


def obtain_all(
    on: MoveNode, config: PathConfig, world: BlockWorld
) -> list[Neighbor[MoveNode]] | None:
    """Every move available from ``on``; None at the edge of the loaded world."""
    x, y, z = on.location.x, on.location.y, on.location.z
    costs = config.costs

    def get(bx: int, by: int, bz: int) -> SimpleType | None:
        return world.get_block_simple(BlockLocation(bx, by, bz))

    def need(bx: int, by: int, bz: int) -> SimpleType:
        return _require(world, BlockLocation(bx, by, bz))

    def wrap(bx: int, by: int, bz: int, cost: float) -> Neighbor[MoveNode]:
        return Neighbor(on.derive(BlockLocation(bx, by, bz)), cost)

    head = get(x, y + 1, z)
    if head is None:
        return None
    # keeping the head under water makes breathing hard
    multiplier = costs.no_breathe_mult if head == SimpleType.WATER else 1.0

    directions = [direction.unit_change() for direction in CardinalDirection]
    adj_legs: list[SimpleType] = []
    adj_head: list[SimpleType] = []
    can_move_adj: list[bool] = []
    for step in directions:
        legs_block = get(x + step.dx, y, z + step.dz)
        head_block = get(x + step.dx, y + 1, z + step.dz)
        if legs_block is None or head_block is None:
            return None
        adj_legs.append(legs_block)
        adj_head.append(head_block)
        can_move_adj.append(legs_block in _PASSABLE and head_block in _PASSABLE)

    result: list[Neighbor[MoveNode]] = []

    traverse_possible = [False] * len(directions)
    for idx, step in enumerate(directions):
        if not can_move_adj[idx]:
            continue
        floor_block = need(x + step.dx, y - 1, z + step.dz)
        walkable = (
            floor_block == SimpleType.SOLID
            or adj_legs[idx] == SimpleType.WATER
            or adj_head[idx] == SimpleType.WATER
        )
        traverse_possible[idx] = walkable
        if walkable:
            result.append(wrap(x + step.dx, y, z + step.dz, costs.block_walk * multiplier))

    for idx, step in enumerate(directions):
        floor_block = need(x + step.dx, y - 1, z + step.dz)
        if can_move_adj[idx] and not traverse_possible[idx] and floor_block != SimpleType.AVOID:
            landed = drop_y(BlockLocation(x + step.dx, y, z + step.dz), world)
            if landed is not None:
                result.append(wrap(x + step.dx, landed + 1, z + step.dz, costs.fall * multiplier))

    above = need(x, y + 2, z)
    floor = need(x, y - 1, z)
    feet = need(x, y, z)

    if above == SimpleType.WATER or (
        head == SimpleType.WATER and above == SimpleType.WALK_THROUGH
    ):
        result.append(wrap(x, y + 1, z, costs.ascend * multiplier))

    if floor == SimpleType.WATER or (
        floor == SimpleType.WALK_THROUGH and head == SimpleType.WATER
    ):
        result.append(wrap(x, y - 1, z, costs.ascend * multiplier))

    can_micro_jump = above == SimpleType.WALK_THROUGH and (
        floor == SimpleType.SOLID or feet == SimpleType.WATER
    )
    if can_micro_jump:
        for idx, step in enumerate(directions):
            if can_move_adj[idx]:
                continue
            adj_above = need(x + step.dx, y + 2, z + step.dz) in _PASSABLE
            if (
                adj_above
                and adj_legs[idx] == SimpleType.SOLID
                and adj_head[idx] in _PASSABLE
            ):
                result.append(wrap(x + step.dx, y + 1, z + step.dz, costs.ascend * multiplier))

    can_jump = above == SimpleType.WALK_THROUGH and floor != SimpleType.WATER
    if can_jump:
        radius = _PARKOUR_RADIUS
        offsets = [(dx, dz) for dx in range(-radius, radius + 1) for dz in range(-radius, radius + 1)]
        not_jumpable = []
        for dx, dz in offsets:
            adj_above_block = get(x + dx, y + 2, z + dz)
            if adj_above_block is None:
                return None
            clear = (
                adj_above_block == SimpleType.WALK_THROUGH
                and need(x + dx, y + 1, z + dz) == SimpleType.WALK_THROUGH
                and need(x + dx, y, z + dz) == SimpleType.WALK_THROUGH
            )
            if not clear:
                not_jumpable.append((dx, dz))

        open_cells: CenteredArray[_Cell] = CenteredArray(radius, _Cell.OPEN)
        # the origin is where we already are
        open_cells[(0, 0)] = _Cell.CLOSED
        for block_dx, block_dz in not_jumpable:
            _close_behind(open_cells, block_dx, block_dz)

        for dx, dz in offsets:
            rad2 = float(dx * dx + dz * dz)
            if (
                need(x + dx, y - 1, z + dz) == SimpleType.SOLID
                and _MIN_PARKOUR_RAD * _MIN_PARKOUR_RAD <= rad2 <= _MAX_PARKOUR_RAD * _MAX_PARKOUR_RAD
                and open_cells[(dx, dz)] == _Cell.OPEN
            ):
                result.append(wrap(x + dx, y, z + dz, costs.block_parkour * multiplier))

    return result