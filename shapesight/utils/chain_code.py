"""Chain-code boundary tracing over a label grid.

Directions: E=0 (+1, 0), N=1 (0, -1), W=2 (-1, 0), S=3 (0, +1). Each region
is walked from its first pixel in scan order, which has no same-label
neighbour to its left or above. At every step the walker first tries to turn
counter-clockwise ((orientation + 1) mod 4) and falls back clockwise one
quarter at a time, so it hugs the outside of the region. The walk ends the
first time it re-enters the start pixel.

A single isolated pixel has no step to take: its chain code is empty and its
perimeter is 0.
"""

from __future__ import annotations

import enum

from shapesight.errors import BoundaryTraceError
from shapesight.utils.grid import PixelGrid, first_occurrences

ChainCode = tuple[int, ...]


class Direction(enum.IntEnum):
    E = 0
    N = 1
    W = 2
    S = 3

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]


_DELTAS = {
    Direction.E: (1, 0),
    Direction.N: (0, -1),
    Direction.W: (-1, 0),
    Direction.S: (0, 1),
}


def step(position: tuple[int, int], direction: int) -> tuple[int, int]:
    dx, dy = _DELTAS[Direction(direction)]
    return position[0] + dx, position[1] + dy


def first_pixels(label_grid: PixelGrid, background: int = 0) -> dict[int, tuple[int, int]]:
    """First (x, y) of every label in scan order."""
    return first_occurrences(label_grid, background)


def _has_label(label_grid: PixelGrid, position: tuple[int, int], label: int) -> bool:
    x, y = position
    return label_grid.contains(x, y) and label_grid.at(x, y) == label


def trace_boundary(
    label_grid: PixelGrid,
    label: int,
    start: tuple[int, int],
) -> ChainCode:
    """Walk the boundary of ``label`` from ``start`` and return the chain code."""
    codes: list[int] = []

    # ``start`` is leftmost-topmost, so only E or S can continue the region.
    right = step(start, Direction.E)
    below = step(start, Direction.S)
    if _has_label(label_grid, right, label):
        orientation, position = int(Direction.E), right
    elif _has_label(label_grid, below, label):
        orientation, position = int(Direction.S), below
    else:
        return ()
    codes.append(orientation)

    max_steps = 4 * label_grid.width * label_grid.height
    while position != start:
        turn = 1
        candidate = step(position, (orientation + turn) % 4)
        while not _has_label(label_grid, candidate, label):
            turn = (turn + 3) % 4
            candidate = step(position, (orientation + turn) % 4)
        orientation = (orientation + turn) % 4
        codes.append(orientation)
        position = candidate
        if len(codes) > max_steps:
            raise BoundaryTraceError(
                f"Boundary of label {label} did not close after {max_steps} steps"
            )

    return tuple(codes)


def chain_codes(label_grid: PixelGrid, background: int = 0) -> dict[int, ChainCode]:
    """Chain code for every label, in first-seen order."""
    return {
        label: trace_boundary(label_grid, label, start)
        for label, start in first_pixels(label_grid, background).items()
    }


def chain_to_points(start: tuple[int, int], chain: ChainCode) -> list[tuple[int, int]]:
    """Positions visited by the walk, ``start`` first.

    For a non-empty (closed) chain the last entry is ``start`` again.
    """
    points = [start]
    position = start
    for code in chain:
        position = step(position, code)
        points.append(position)
    return points


def is_closed(start: tuple[int, int], chain: ChainCode) -> bool:
    return chain_to_points(start, chain)[-1] == start


def perimeter(chain: ChainCode) -> int:
    """4-connected perimeter: the number of steps in the walk."""
    return len(chain)
