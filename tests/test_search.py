import time
from dataclasses import dataclass

import pytest

from swarmbot.search import (
    AStar,
    Neighbor,
    PathResult,
    build_path,
    build_path_forward,
    reconstruct_path,
)


@dataclass(frozen=True)
class Point:
    pos: int

    def get_record(self):
        return self.pos


class LineProgressor:
    def __init__(self, low=None, high=None, edges=()):
        self.low = low
        self.high = high
        self.edges = set(edges)

    def progressions(self, node):
        if node.pos in self.edges:
            return None
        result = []
        for step in (-1, 1):
            nxt = node.pos + step
            if self.low is not None and nxt < self.low:
                continue
            if self.high is not None and nxt > self.high:
                continue
            result.append(Neighbor(Point(nxt), 1.0))
        return result


class GraphProgressor:
    def __init__(self, edges):
        self.edges = edges

    def progressions(self, node):
        return [Neighbor(Point(dst), cost) for dst, cost in self.edges.get(node.pos, [])]


class DistanceHeuristic:
    def __init__(self, goal):
        self.goal = goal

    def heuristic(self, node):
        return float(abs(self.goal - node.pos))


class ZeroHeuristic:
    def heuristic(self, node):
        return 0.0


class ReachGoal:
    def __init__(self, goal):
        self.goal = goal

    def is_goal(self, node):
        return node.pos == self.goal


def run(search, heuristic, progressor, goal):
    while True:
        result = search.iterate(heuristic, progressor, goal)
        if result is not None:
            return result


def test_reconstruct_path_follows_parents():
    assert reconstruct_path(["a", "b", "c"], 2, {2: 1, 1: 0}) == ["a", "b", "c"]


def test_reconstruct_path_of_root_is_root():
    assert reconstruct_path(["a", "b"], 0, {1: 0}) == ["a"]


def test_build_path_forward():
    assert build_path_forward({3: 2, 2: 1}, 3) == [1, 2, 3]


def test_build_path_joins_both_sides_with_split_twice():
    assert build_path({2: 1}, {2: 3}, 2) == [1, 2, 2, 3]


def test_neighbor_repr():
    assert repr(Neighbor("x", 2.5)) == "Neighbor 'x' @ dist 2.5"


def test_finds_straight_path():
    search = AStar(Point(0))
    result = run(search, DistanceHeuristic(5), LineProgressor(), ReachGoal(5))
    assert result == PathResult(True, [0, 1, 2, 3, 4, 5])


def test_start_is_goal():
    search = AStar(Point(7))
    result = run(search, DistanceHeuristic(7), LineProgressor(), ReachGoal(7))
    assert result == PathResult(True, [7])


def test_prefers_cheaper_route():
    graph = GraphProgressor({0: [(1, 10.0), (2, 1.0)], 2: [(1, 1.0)]})
    result = run(AStar(Point(0)), ZeroHeuristic(), graph, ReachGoal(1))
    assert result.complete
    assert result.value == [0, 2, 1]


def test_exhausted_search_returns_closest_partial_path():
    progressor = LineProgressor(low=0, high=3)
    result = run(AStar(Point(0)), DistanceHeuristic(10), progressor, ReachGoal(10))
    assert not result.complete
    assert result.value == [0, 1, 2, 3]


def test_edge_stops_expansion():
    progressor = LineProgressor(low=0, edges={2})
    result = run(AStar(Point(0)), DistanceHeuristic(5), progressor, ReachGoal(5))
    assert not result.complete
    assert result.value == [0, 1, 2]


def test_using_finished_search_raises():
    search = AStar(Point(0))
    run(search, DistanceHeuristic(1), LineProgressor(), ReachGoal(1))
    with pytest.raises(RuntimeError):
        search.iterate(DistanceHeuristic(1), LineProgressor(), ReachGoal(1))
    with pytest.raises(RuntimeError):
        search.set_max_millis(10)


def test_iterate_until_past_deadline_is_in_progress_then_finishes():
    search = AStar(Point(0))
    args = (DistanceHeuristic(4), LineProgressor(), ReachGoal(4))
    assert search.iterate_until(time.monotonic() - 1.0, *args) is None
    result = search.iterate_until(time.monotonic() + 10.0, *args)
    assert result.complete
    assert result.value == [0, 1, 2, 3, 4]


def test_iterate_until_gives_up_after_max_duration():
    search = AStar(Point(0))
    search.set_max_millis(0)
    result = search.iterate_until(
        time.monotonic() + 0.02,
        DistanceHeuristic(10**9),
        LineProgressor(),
        ReachGoal(10**9),
    )
    assert result is not None
    assert not result.complete
    assert result.value[0] == 0