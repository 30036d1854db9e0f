"""Connected-component labeling (4-connected BFS flood fill) and label palettes.

Labels are plain integers handed out by a LabelAllocator that the caller
(or ``label_components`` itself) creates fresh for every run. Colours are a
separate rendering concern: LabelPalette maps the n-th label to an RGB
triple only when a label grid is turned into a picture.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from shapesight.errors import TooManyRegions
from shapesight.utils.grid import PixelGrid, first_occurrences

logger = logging.getLogger(__name__)

# (dx, dy) in test order: up, down, left, right.
NEIGHBORS_4 = ((0, -1), (0, 1), (-1, 0), (1, 0))


@dataclass
class LabelAllocator:
    """Monotonic label counter. One instance per labeling run.

    ``reserved`` is never handed out; set it to the background value so a
    label can never be mistaken for background.
    """

    start: int = 1
    step: int = 1
    limit: int | None = None
    reserved: int | None = None
    allocated: int = field(default=0, init=False)
    issued: list[int] = field(default_factory=list, init=False)
    _cursor: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.start <= 0 or self.step <= 0:
            raise ValueError("Label start and step must be positive")

    def allocate(self) -> int:
        if self.limit is not None and self.allocated >= self.limit:
            raise TooManyRegions(f"More than {self.limit} regions in one labeling run")
        label = self._next()
        if label == self.reserved:
            label = self._next()
        self.allocated += 1
        self.issued.append(label)
        return label

    def _next(self) -> int:
        label = self.start + self._cursor * self.step
        self._cursor += 1
        return label


def label_components(
    grid: PixelGrid,
    foreground: int = 1,
    allocator: LabelAllocator | None = None,
    background: int = 0,
) -> tuple[PixelGrid, int]:
    """Replace each 4-connected foreground region with a unique label.

    Regions are discovered in scan order (x outer, y inner), so label values
    increase with the column of each region's leftmost-topmost pixel.
    Every non-foreground sample is written as ``background``, so the result
    holds only background and labels. Returns (label grid, count).
    """
    allocator = allocator if allocator is not None else LabelAllocator(reserved=background)
    if allocator.reserved is None:
        allocator.reserved = background
    elif allocator.reserved != background:
        raise ValueError(
            f"Allocator reserves {allocator.reserved} but background is {background}"
        )
    source = grid.samples
    working = np.full(source.shape, background, dtype=np.int64)
    visited = np.zeros(source.shape, dtype=bool)
    height, width = source.shape
    count = 0

    for x in range(width):
        for y in range(height):
            if source[y, x] == foreground and not visited[y, x]:
                label = allocator.allocate()
                _flood_fill(source, working, visited, x, y, label, foreground)
                count += 1

    logger.debug("Labeled %d region(s) in %dx%d grid", count, width, height)
    return grid.with_samples(working), count


def _flood_fill(
    source: NDArray[np.int64],
    working: NDArray[np.int64],
    visited: NDArray[np.bool_],
    start_x: int,
    start_y: int,
    label: int,
    foreground: int,
) -> None:
    """BFS flood fill from (start_x, start_y), writing ``label`` into ``working``."""
    height, width = source.shape
    queue = deque([(start_x, start_y)])
    visited[start_y, start_x] = True
    working[start_y, start_x] = label

    while queue:
        x, y = queue.popleft()
        for dx, dy in NEIGHBORS_4:
            nx, ny = x + dx, y + dy
            if (
                0 <= nx < width
                and 0 <= ny < height
                and not visited[ny, nx]
                and source[ny, nx] == foreground
            ):
                visited[ny, nx] = True
                working[ny, nx] = label
                queue.append((nx, ny))


@dataclass(frozen=True)
class LabelPalette:
    """Chains three 8-bit channels as an odometer over range(base, 256, step).

    The n-th label (0-based, in first-seen order) gets
    (levels[n % k], levels[n // k % k], levels[n // k²]) with k levels.
    """

    base: int = 20
    step: int = 5

    def __post_init__(self) -> None:
        if not (0 < self.base <= 255) or self.step <= 0:
            raise ValueError("Palette base must be in (0, 255] and step positive")

    @property
    def levels(self) -> list[int]:
        return list(range(self.base, 256, self.step))

    @property
    def capacity(self) -> int:
        return len(self.levels) ** 3

    def color_for(self, index: int) -> tuple[int, int, int]:
        levels = self.levels
        k = len(levels)
        if index < 0 or index >= k**3:
            raise TooManyRegions(
                f"Palette with base={self.base}, step={self.step} holds {k**3} colours; "
                f"index {index} is out of range"
            )
        return (levels[index % k], levels[(index // k) % k], levels[index // (k * k)])


def render_labels(
    label_grid: PixelGrid,
    palette: LabelPalette | None = None,
    background: int = 0,
) -> NDArray[np.uint8]:
    """Colour a label grid: (H, W, 3) uint8, background black."""
    palette = palette or LabelPalette()
    order = list(first_occurrences(label_grid, background))
    if len(order) > palette.capacity:
        raise TooManyRegions(f"{len(order)} labels exceed palette capacity {palette.capacity}")

    values, inverse = np.unique(label_grid.samples, return_inverse=True)
    lut = np.zeros((len(values), 3), dtype=np.uint8)
    index_of = {label: i for i, label in enumerate(order)}
    for k, value in enumerate(values.tolist()):
        if value in index_of:
            lut[k] = palette.color_for(index_of[value])
    return lut[inverse.reshape(label_grid.samples.shape)]
