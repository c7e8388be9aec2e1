"""Search nodes for moving a player through the block world."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from swarmbot.blocks import BlockState
from swarmbot.geometry import BlockLocation


@dataclass
class Costs:
    """The cost of each kind of move."""

    block_walk: float = 1.0
    block_parkour: float = 1.5
    mine_unrelated: float = 20.0
    mine_required: float = 1.0
    place_unrelated: float = 20.0
    place_required: float = 1.0
    ascend: float = 1.0
    no_breathe_mult: float = 3.0
    fall: float = 1.0


@dataclass
class PathConfig:
    """Settings for path finding."""

    costs: Costs = field(default_factory=Costs)
    parkour: bool = True


@dataclass(frozen=True)
class Action:
    """A block change needed to reach a node."""

    location: BlockLocation
    state: BlockState


@dataclass(frozen=True)
class MoveState:
    """The part of a node that decides whether two nodes are equal."""

    location: BlockLocation
    throwaway_block_count: int = 0


@dataclass(frozen=True, eq=False)
class MoveRecord:
    """A node as stored in a path; the action does not affect equality."""

    state: MoveState
    action_to_obtain: Action | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MoveRecord):
            return NotImplemented
        return self.state == other.state

    def __hash__(self) -> int:
        return hash(self.state)


@dataclass(frozen=True)
class MoveNode:
    """Where the player stands, with what it took to get there."""

    location: BlockLocation
    action_to_obtain: Action | None = None
    throwaway_block_count: int = 0

    @classmethod
    def simple(cls, location: BlockLocation) -> MoveNode:
        return cls(location)

    def derive(self, location: BlockLocation) -> MoveNode:
        """A successor at ``location`` with no action, keeping the rest."""
        return replace(self, location=location, action_to_obtain=None)

    def get_record(self) -> MoveRecord:
        return MoveRecord(
            MoveState(self.location, self.throwaway_block_count),
            self.action_to_obtain,
        )