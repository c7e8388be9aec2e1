"""Incremental A* search that can be paused and resumed between ticks."""

from __future__ import annotations

import heapq
import itertools
import logging
import sys
import time
from dataclasses import dataclass, field
from typing import Generic, Hashable, Mapping, Protocol, Sequence, TypeVar

_LOG = logging.getLogger(__name__)

T = TypeVar("T")
N = TypeVar("N", bound="SearchNode")
N_contra = TypeVar("N_contra", contravariant=True)

# Weights for the fallback heuristics used when a search gives up.
COEFFICIENTS = (1.5, 2.0, 2.5, 3.0, 4.0, 5.0, 10.0)
MIN_DIST = 5.0
DEFAULT_MAX_MILLIS = 5000

_FLOAT_MAX = sys.float_info.max


class SearchNode(Protocol):
    """A node of the search graph.

    Equal nodes must give equal records and unequal nodes unequal records;
    records are what the finished path is made of.
    """

    def get_record(self) -> Hashable:
        """The compact, hashable summary of this node."""


@dataclass
class Neighbor(Generic[T]):
    """A node reachable from another at the given cost."""

    value: T
    cost: float

    def __repr__(self) -> str:
        return f"Neighbor {self.value!r} @ dist {self.cost}"


class Heuristic(Protocol[N_contra]):
    """Estimates the remaining cost from a node to the goal."""

    def heuristic(self, node: N_contra) -> float:
        """The estimated cost to reach the goal from ``node``."""


class Progressor(Protocol[N]):
    """Lists the moves available from a node."""

    def progressions(self, node: N) -> list[Neighbor[N]] | None:
        """The neighbours of ``node``, or None at the edge of the known world."""


class GoalCheck(Protocol[N_contra]):
    """Decides whether a node is a goal."""

    def is_goal(self, node: N_contra) -> bool:
        """Whether ``node`` satisfies the goal."""


@dataclass
class PathResult(Generic[T]):
    """A found path; ``complete`` is false when it stops short of the goal."""

    complete: bool
    value: list[T]


def reconstruct_path(
    records: Sequence[T], goal_idx: int, parent_map: Mapping[int, int]
) -> list[T]:
    """Follow parents back from ``goal_idx`` and return the path from the root."""
    path = [records[goal_idx]]
    on_idx = goal_idx
    while on_idx in parent_map:
        on_idx = parent_map[on_idx]
        path.append(records[on_idx])
    path.reverse()
    return path


def _trace(start: T, lookup: Mapping[T, T]) -> list[T]:
    trail = [start]
    on = start
    while on in lookup:
        on = lookup[on]
        trail.append(on)
    return trail


def build_path(forward: Mapping[T, T], backward: Mapping[T, T], split: T) -> list[T]:
    """Join a forward and a backward search that met at ``split``.

    ``split`` appears once from each side.
    """
    path = _trace(split, forward)
    path.reverse()
    path.extend(_trace(split, backward))
    return path


def build_path_forward(forward: Mapping[T, T], goal: T) -> list[T]:
    """The path from the root of a forward search to ``goal``."""
    path = _trace(goal, forward)
    path.reverse()
    return path


@dataclass
class _SearchState:
    records: list[Hashable]
    record_to_idx: dict[Hashable, int]
    g_scores: dict[int, float]
    open_set: list[tuple[float, int, object]]
    parent_map: dict[int, int] = field(default_factory=dict)
    counter: itertools.count = field(default_factory=itertools.count)
    valid: bool = False
    total_millis: int = 0
    max_millis: int = DEFAULT_MAX_MILLIS
    meta_heuristics: list[float] = field(
        default_factory=lambda: [_FLOAT_MAX] * len(COEFFICIENTS)
    )
    meta_ids: list[int] = field(default_factory=lambda: [0] * len(COEFFICIENTS))

    def push(self, score: float, node: object) -> None:
        heapq.heappush(self.open_set, (score, next(self.counter), node))


class AStar(Generic[N]):
    """An A* search that runs in slices until a deadline.

    Once a result has been returned the search is finished and may not be
    iterated again.
    """

    def __init__(self, start: N) -> None:
        record = start.get_record()
        self._state: _SearchState | None = _SearchState(
            records=[record],
            record_to_idx={record: 0},
            g_scores={0: 0.0},
            open_set=[],
        )
        self._state.push(_FLOAT_MAX, start)

    def _live(self) -> _SearchState:
        if self._state is None:
            raise RuntimeError("search was used after it finished")
        return self._state

    def set_max_millis(self, value: int) -> None:
        """Set how many milliseconds the search may take before giving up."""
        self._live().max_millis = value

    def select_best(self) -> PathResult[Hashable]:
        """Finish with the most promising partial path found so far."""
        state = self._live()
        self._state = None
        best_score, best_id = _FLOAT_MAX, 0
        for score, node_id in zip(state.meta_heuristics, state.meta_ids):
            if score < best_score:
                best_score, best_id = score, node_id
            if state.g_scores[node_id] > MIN_DIST:
                _LOG.debug("larger than min dist")
                path = reconstruct_path(state.records, node_id, state.parent_map)
                return PathResult(False, path)
        return PathResult(False, reconstruct_path(state.records, best_id, state.parent_map))

    def iterate_until(
        self,
        end_at: float,
        heuristic: Heuristic[N],
        progressor: Progressor[N],
        goal_check: GoalCheck[N],
    ) -> PathResult[Hashable] | None:
        """Search until ``end_at`` (a ``time.monotonic()`` value).

        Returns None while the search is still in progress.
        """
        iter_start = time.monotonic()
        while True:
            now = time.monotonic()
            if now >= end_at:
                state = self._live()
                state.total_millis += int((now - iter_start) * 1000)
                if state.total_millis > state.max_millis:
                    _LOG.debug("reached maxed duration")
                    return self.select_best()
                return None
            result = self.iterate(heuristic, progressor, goal_check)
            if result is not None:
                return result

    def iterate(
        self,
        heuristic: Heuristic[N],
        progressor: Progressor[N],
        goal_check: GoalCheck[N],
    ) -> PathResult[Hashable] | None:
        """Expand one open node; returns None while still in progress."""
        state = self._live()
        if not state.open_set:
            _LOG.debug("no more nodes iterated through %d", len(state.records))
            return self.select_best()

        _, _, parent = heapq.heappop(state.open_set)
        parent_record = parent.get_record()  # type: ignore[attr-defined]
        parent_idx = state.record_to_idx[parent_record]

        if goal_check.is_goal(parent):  # type: ignore[arg-type]
            self._state = None
            return PathResult(True, reconstruct_path(state.records, parent_idx, state.parent_map))

        neighbors = progressor.progressions(parent)  # type: ignore[arg-type]
        if neighbors is None:
            return None

        parent_g = state.g_scores[parent_idx]
        for neighbor in neighbors:
            tentative_g = parent_g + neighbor.cost
            record = neighbor.value.get_record()
            record_idx = state.record_to_idx.get(record)
            if record_idx is None:
                record_idx = len(state.records)
                state.records.append(record)
                state.record_to_idx[record] = record_idx
            elif tentative_g >= state.g_scores[record_idx]:
                continue
            state.g_scores[record_idx] = tentative_g
            state.parent_map[record_idx] = parent_idx

            h_score = heuristic.heuristic(neighbor.value)
            for i, coefficient in enumerate(COEFFICIENTS):
                meta = h_score + tentative_g / coefficient
                if meta < state.meta_heuristics[i]:
                    state.meta_heuristics[i] = meta
                    state.meta_ids[i] = record_idx
                    if not state.valid and tentative_g > MIN_DIST:
                        state.valid = True

            state.push(tentative_g + h_score, neighbor.value)
        return None