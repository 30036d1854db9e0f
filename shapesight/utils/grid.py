"""PixelGrid — rectangular single-channel sample buffer. No engine imports.

Samples live in an int64 numpy array of shape (height, width) and are
addressed as (x, y). Every scan in the package walks the grid column-major
(x outer, y inner); ``scan_order`` and ``first_occurrences`` are the only
places that order is spelled out.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from shapesight.errors import InvalidGridError

# Largest accepted width/height at ingestion.
MAX_DIMENSION = 512

SAMPLE_MIN = 0
SAMPLE_MAX = 255

# ITU-R 601-2 luma weights (per mille). The weighted sum is rounded to the
# nearest integer, as Pillow does for mode "L".
_LUMA_WEIGHTS = np.array([299, 587, 114], dtype=np.int64)
_CHANNELS = {"red": 0, "green": 1, "blue": 2}


@dataclass(frozen=True, eq=False)
class PixelGrid:
    """Immutable 2-D integer grid. Operators return new grids."""

    samples: NDArray[np.int64]

    def __post_init__(self) -> None:
        arr = np.asarray(self.samples)
        if arr.ndim != 2:
            raise InvalidGridError(f"Grid must be 2-D, got {arr.ndim} dimension(s)")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise InvalidGridError("Grid dimensions must be > 0")
        if arr.dtype.kind not in "biu":
            raise InvalidGridError(f"Grid samples must be integers, got {arr.dtype}")
        arr = arr.astype(np.int64, copy=True)
        arr.setflags(write=False)
        object.__setattr__(self, "samples", arr)

    # -- constructors --

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> PixelGrid:
        """Build from a list of rows (``rows[y][x]``)."""
        if len(rows) == 0:
            raise InvalidGridError("Grid dimensions must be > 0")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise InvalidGridError("All grid rows must have the same length")
        return cls(np.array(rows, dtype=np.int64).reshape(len(rows), width))

    @classmethod
    def from_array(cls, arr: NDArray) -> PixelGrid:
        return cls(np.asarray(arr))

    @classmethod
    def zeros(cls, width: int, height: int, value: int = 0) -> PixelGrid:
        return cls(np.full((height, width), value, dtype=np.int64))

    @classmethod
    def from_rgb(cls, rgb: NDArray, channel: str = "red") -> PixelGrid:
        """Reduce an (H, W, 3|4) colour array to one channel.

        ``red``/``green``/``blue`` pick a channel as-is; ``luminance`` uses
        the 601-2 weights rounded to the nearest integer. A 2-D array passes through.
        """
        arr = np.asarray(rgb)
        if arr.ndim == 2:
            return cls(arr)
        if arr.ndim != 3 or arr.shape[2] < 3:
            raise InvalidGridError(f"Expected an (H, W, 3) colour array, got shape {arr.shape}")
        rgb_int = arr[:, :, :3].astype(np.int64)
        if channel == "luminance":
            return cls((rgb_int @ _LUMA_WEIGHTS + 500) // 1000)
        if channel not in _CHANNELS:
            raise InvalidGridError(f"Unknown channel '{channel}'")
        return cls(rgb_int[:, :, _CHANNELS[channel]])

    # -- shape --

    @property
    def width(self) -> int:
        return int(self.samples.shape[1])

    @property
    def height(self) -> int:
        return int(self.samples.shape[0])

    @property
    def shape(self) -> tuple[int, int]:
        """(height, width), as numpy reports it."""
        return (self.height, self.width)

    @property
    def size(self) -> tuple[int, int]:
        """(width, height)."""
        return (self.width, self.height)

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def at(self, x: int, y: int) -> int:
        return int(self.samples[y, x])

    # -- conversions --

    def copy(self) -> PixelGrid:
        return PixelGrid(self.samples)

    def with_samples(self, arr: NDArray) -> PixelGrid:
        return PixelGrid(np.asarray(arr))

    def to_rows(self) -> list[list[int]]:
        return self.samples.tolist()

    def scan_order(self) -> Iterator[tuple[int, int]]:
        """Yield every (x, y): x outer, y inner."""
        for x in range(self.width):
            for y in range(self.height):
                yield x, y

    def count(self, value: int) -> int:
        return int(np.count_nonzero(self.samples == value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self.size == other.size and bool(np.array_equal(self.samples, other.samples))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PixelGrid({self.width}x{self.height})"


def validate_dimensions(grid: PixelGrid, max_dim: int = MAX_DIMENSION) -> PixelGrid:
    """Ingestion check: both dimensions must be within [1, max_dim]."""
    if not (1 <= grid.width <= max_dim and 1 <= grid.height <= max_dim):
        raise InvalidGridError(
            f"Error in image dimensions {grid.width}x{grid.height} "
            f"(have to be > 0 and <= {max_dim})"
        )
    return grid


def first_occurrences(grid: PixelGrid, background: int = 0) -> dict[int, tuple[int, int]]:
    """Map each non-background value to its first (x, y) in scan order.

    The dict is ordered by first appearance.
    """
    # Raveling the transpose walks x outer, y inner.
    flat = grid.samples.T.ravel()
    values, first_idx = np.unique(flat, return_index=True)
    order = np.argsort(first_idx, kind="stable")
    height = grid.height
    result: dict[int, tuple[int, int]] = {}
    for k in order:
        value = int(values[k])
        if value == background:
            continue
        idx = int(first_idx[k])
        result[value] = (idx // height, idx % height)
    return result


def unique_labels(grid: PixelGrid, background: int = 0) -> list[int]:
    """Non-background values in first-seen scan order."""
    return list(first_occurrences(grid, background))
