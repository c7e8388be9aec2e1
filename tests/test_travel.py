import time

import pytest

from swarmbot.blocks import SimpleType
from swarmbot.geometry import BlockLocation, BlockLocation2D, ChunkLocation
from swarmbot.moves import obtain_all
from swarmbot.nodes import MoveNode, PathConfig
from swarmbot.travel import (
    BlockGoalCheck,
    BlockHeuristic,
    BlockNearGoalCheck,
    CenterChunkGoalCheck,
    ChunkGoalCheck,
    ChunkHeuristic,
    MovementProgressor,
    navigate_block,
    navigate_center_chunk,
    navigate_chunk,
    navigate_near_block,
)


class _World:
    def __init__(self, radius=40, floor_y=0):
        self.radius = radius
        self.floor_y = floor_y

    def get_block_simple(self, location):
        if abs(location.x) > self.radius or abs(location.z) > self.radius:
            return None
        return SimpleType.SOLID if location.y <= self.floor_y else SimpleType.WALK_THROUGH


def _node(x, y, z):
    return MoveNode.simple(BlockLocation(x, y, z))


def _deadline(seconds=20.0):
    return time.monotonic() + seconds


def test_block_goal_allows_one_block_of_height():
    check = BlockGoalCheck(BlockLocation(5, 10, 5))
    assert check.is_goal(_node(5, 11, 5))
    assert check.is_goal(_node(5, 9, 5))
    assert not check.is_goal(_node(5, 12, 5))
    assert not check.is_goal(_node(6, 10, 5))


def test_near_goal_must_not_hit():
    goal = BlockLocation2D(0, 0)
    strict = BlockNearGoalCheck(goal, 4.0, True)
    loose = BlockNearGoalCheck(goal, 4.0, False)
    assert not strict.is_goal(_node(0, 1, 0))
    assert loose.is_goal(_node(0, 1, 0))
    assert strict.is_goal(_node(2, 1, 0))
    assert not strict.is_goal(_node(2, 1, 1))


def test_chunk_goal():
    check = ChunkGoalCheck(ChunkLocation(1, -1))
    assert check.is_goal(_node(16, 1, -16))
    assert check.is_goal(_node(31, 1, -1))
    assert not check.is_goal(_node(32, 1, -1))
    assert not check.is_goal(_node(16, 1, 0))


def test_center_chunk_goal():
    check = CenterChunkGoalCheck(ChunkLocation(0, 0))
    assert check.is_goal(_node(8, 1, 8))
    assert check.is_goal(_node(7, 1, 7))
    assert not check.is_goal(_node(9, 1, 8))
    assert not check.is_goal(_node(6, 1, 8))


def test_block_heuristic_is_weighted_distance():
    heuristic = BlockHeuristic(1.0, BlockLocation(3, 4, 0))
    assert heuristic.heuristic(_node(0, 0, 0)) == pytest.approx(1.0)
    assert heuristic.heuristic(_node(3, 4, 0)) == 0.0


def test_chunk_heuristic_zero_at_center_goal():
    goal = ChunkLocation(2, -3)
    heuristic = ChunkHeuristic(goal, 1.0)
    check = CenterChunkGoalCheck(goal)
    center = _node(heuristic.center_x, 1, heuristic.center_z)
    assert heuristic.heuristic(center) == 0.0
    assert check.is_goal(center)
    assert heuristic.heuristic(_node(0, 1, 0)) > 0.0


def test_progressor_delegates_to_moves():
    world = _World()
    node = _node(0, 1, 0)
    progressor = MovementProgressor(world, PathConfig())
    expected = obtain_all(node, PathConfig(), world)
    result = progressor.progressions(node)
    assert [(n.value, n.cost) for n in result] == [(n.value, n.cost) for n in expected]


def test_navigate_block_finds_complete_path():
    start, goal = BlockLocation(0, 1, 0), BlockLocation(10, 1, 0)
    result = navigate_block(start, goal).iterate_until(_deadline(), _World())
    assert result is not None
    assert result.complete
    assert result.value[0].state.location == start
    assert BlockGoalCheck(goal).is_goal(MoveNode.simple(result.value[-1].state.location))
    for before, after in zip(result.value, result.value[1:]):
        assert before.state.location.to_2d().dist2(after.state.location.to_2d()) <= 4.5 * 4.5


def test_navigate_near_block_stops_short():
    goal = BlockLocation2D(8, 0)
    result = navigate_near_block(BlockLocation(0, 1, 0), goal, 4.0, True).iterate_until(
        _deadline(), _World()
    )
    assert result is not None and result.complete
    end = result.value[-1].state.location.to_2d()
    assert end != goal
    assert end.dist2(goal) <= 4.0


def test_navigate_chunk_ends_in_chunk():
    goal = ChunkLocation(1, 0)
    result = navigate_chunk(BlockLocation(0, 1, 0), goal).iterate_until(_deadline(), _World())
    assert result is not None and result.complete
    assert ChunkLocation.from_block(result.value[-1].state.location) == goal


def test_navigate_center_chunk_ends_at_center():
    goal = ChunkLocation(1, 1)
    result = navigate_center_chunk(BlockLocation(0, 1, 0), goal).iterate_until(
        _deadline(), _World()
    )
    assert result is not None and result.complete
    assert CenterChunkGoalCheck(goal).is_goal(MoveNode.simple(result.value[-1].state.location))


def test_unreachable_goal_gives_incomplete_path():
    start = BlockLocation(0, 1, 0)
    result = navigate_block(start, BlockLocation(50, 1, 0)).iterate_until(
        _deadline(60.0), _World(radius=8)
    )
    assert result is not None
    assert not result.complete
    assert result.value[0].state.location == start


def test_exceeding_max_millis_returns_start_only():
    start = BlockLocation(0, 1, 0)
    problem = navigate_block(start, BlockLocation(10, 1, 0))
    problem.set_max_millis(-1)
    result = problem.iterate_until(time.monotonic() - 1.0, _World())
    assert result is not None
    assert not result.complete
    assert [record.state.location for record in result.value] == [start]


def test_recalc_restarts_search():
    goal = BlockLocation(6, 1, 0)
    problem = navigate_block(BlockLocation(0, 1, 0), goal)
    first = problem.iterate_until(_deadline(), _World())
    assert first is not None and first.complete
    with pytest.raises(RuntimeError):
        problem.iterate_until(_deadline(), _World())
    new_start = BlockLocation(0, 1, 5)
    problem.recalc(MoveNode.simple(new_start))
    second = problem.iterate_until(_deadline(), _World())
    assert second is not None and second.complete
    assert second.value[0].state.location == new_start
    assert second.value[-1].state.location.x == goal.x