"""Travel problems: goals, heuristics and the search that ties them together."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, Hashable, TypeVar

from swarmbot.geometry import BlockLocation, BlockLocation2D, ChunkLocation
from swarmbot.moves import BlockWorld, obtain_all
from swarmbot.nodes import MoveNode, PathConfig
from swarmbot.search import AStar, GoalCheck, Heuristic, Neighbor, PathResult

H = TypeVar("H", bound=Heuristic)
G = TypeVar("G", bound=GoalCheck)

_HEURISTIC_WEIGHT = 0.2


@dataclass(frozen=True)
class BlockGoalCheck:
    """Reached when standing on the goal column within one block of its y."""

    goal: BlockLocation

    def is_goal(self, node: MoveNode) -> bool:
        location = node.location
        return (
            abs(location.y - self.goal.y) <= 1
            and location.x == self.goal.x
            and location.z == self.goal.z
        )


@dataclass(frozen=True)
class BlockNearGoalCheck:
    """Reached within a squared horizontal distance of the goal.

    With ``must_not_hit`` the goal column itself does not count.
    """

    goal: BlockLocation2D
    dist2: float
    must_not_hit: bool

    def is_goal(self, node: MoveNode) -> bool:
        here = node.location.to_2d()
        same = self.must_not_hit and here == self.goal
        return not same and here.dist2(self.goal) <= self.dist2


@dataclass(frozen=True)
class ChunkGoalCheck:
    """Reached anywhere inside the goal chunk."""

    goal: ChunkLocation

    def is_goal(self, node: MoveNode) -> bool:
        return ChunkLocation.from_block(node.location) == self.goal


class CenterChunkGoalCheck:
    """Reached on one of the blocks at the centre of the goal chunk."""

    def __init__(self, goal: ChunkLocation) -> None:
        self.goal_x_center = (goal.x << 4) + 8
        self.goal_z_center = (goal.z << 4) + 8

    def is_goal(self, node: MoveNode) -> bool:
        dx = self.goal_x_center - node.location.x
        dz = self.goal_z_center - node.location.z
        return 0 <= dx <= 1 and 0 <= dz <= 1


@dataclass(frozen=True)
class BlockHeuristic:
    """Weighted straight-line distance to a goal block."""

    move_cost: float
    goal: BlockLocation

    def heuristic(self, node: MoveNode) -> float:
        return node.location.dist(self.goal) * self.move_cost * _HEURISTIC_WEIGHT


class ChunkHeuristic:
    """Weighted horizontal distance to the centre of a goal chunk."""

    def __init__(self, goal: ChunkLocation, move_cost: float) -> None:
        self.move_cost = move_cost
        self.center_x = (goal.x << 4) + 8
        self.center_z = (goal.z << 4) + 8

    def heuristic(self, node: MoveNode) -> float:
        dx = float(node.location.x - self.center_x)
        dz = float(node.location.z - self.center_z)
        return math.sqrt(dx * dx + dz * dz) * self.move_cost * _HEURISTIC_WEIGHT


@dataclass(frozen=True)
class MovementProgressor:
    """Lists player moves in a given world."""

    world: BlockWorld
    config: PathConfig = field(default_factory=PathConfig)

    def progressions(self, node: MoveNode) -> list[Neighbor[MoveNode]] | None:
        return obtain_all(node, self.config, self.world)


class PlayerProblem(Generic[H, G]):
    """A path search for a player from a start node to a goal."""

    def __init__(self, start: MoveNode, heuristic: H, goal_checker: G) -> None:
        self.heuristic = heuristic
        self.goal_checker = goal_checker
        self._a_star: AStar[MoveNode] = AStar(start)

    def set_max_millis(self, value: int) -> None:
        self._a_star.set_max_millis(value)

    def iterate_until(
        self, end_at: float, world: BlockWorld, config: PathConfig | None = None
    ) -> PathResult[Hashable] | None:
        """Search until ``end_at`` (a ``time.monotonic()`` value); None if unfinished."""
        progressor = MovementProgressor(world, config if config is not None else PathConfig())
        return self._a_star.iterate_until(end_at, self.heuristic, progressor, self.goal_checker)

    def recalc(self, start: MoveNode) -> None:
        """Restart the search from ``start``."""
        self._a_star = AStar(start)


def navigate_block(
    start: BlockLocation, goal: BlockLocation
) -> PlayerProblem[BlockHeuristic, BlockGoalCheck]:
    return PlayerProblem(MoveNode.simple(start), BlockHeuristic(1.0, goal), BlockGoalCheck(goal))


def navigate_near_block(
    start: BlockLocation, goal: BlockLocation2D, dist2: float, must_not_hit: bool
) -> PlayerProblem[BlockHeuristic, BlockNearGoalCheck]:
    return PlayerProblem(
        MoveNode.simple(start),
        BlockHeuristic(1.0, goal.to_3d()),
        BlockNearGoalCheck(goal, dist2, must_not_hit),
    )


def navigate_chunk(
    start: BlockLocation, goal: ChunkLocation
) -> PlayerProblem[ChunkHeuristic, ChunkGoalCheck]:
    return PlayerProblem(MoveNode.simple(start), ChunkHeuristic(goal, 1.0), ChunkGoalCheck(goal))


def navigate_center_chunk(
    start: BlockLocation, goal: ChunkLocation
) -> PlayerProblem[ChunkHeuristic, CenterChunkGoalCheck]:
    return PlayerProblem(
        MoveNode.simple(start), ChunkHeuristic(goal, 1.0), CenterChunkGoalCheck(goal)
    )