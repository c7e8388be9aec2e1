"""A square grid addressed by offsets from its centre."""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class CenteredArray(Generic[T]):
    """A (2r+1) x (2r+1) grid indexed by ``(x, y)`` with both in ``[-r, r]``."""

    def __init__(self, radius: int, default: T = None) -> None:  # type: ignore[assignment]
        if radius < 0:
            raise ValueError(f"radius must not be negative, got {radius}")
        self.radius = radius
        self._width = 2 * radius + 1
        self._cells: list[T] = [default] * (self._width * self._width)

    def _index(self, key: tuple[int, int]) -> int:
        x, y = key
        if abs(x) > self.radius or abs(y) > self.radius:
            raise IndexError(f"{key} is outside radius {self.radius}")
        center = len(self._cells) // 2
        return center - y * self._width + x

    def __getitem__(self, key: tuple[int, int]) -> T:
        return self._cells[self._index(key)]

    def __setitem__(self, key: tuple[int, int], value: T) -> None:
        self._cells[self._index(key)] = value