"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from shapesight.utils.grid import PixelGrid


def block_grid(width: int, height: int, blocks: list[tuple[int, int, int, int]], value: int = 1) -> PixelGrid:
    """Zero grid with filled (x, y, w, h) rectangles."""
    arr = np.zeros((height, width), dtype=np.int64)
    for x, y, w, h in blocks:
        arr[y : y + h, x : x + w] = value
    return PixelGrid(arr)


def disc_grid(size: int, radius: int, value: int = 1) -> PixelGrid:
    c = size // 2
    ys, xs = np.mgrid[0:size, 0:size]
    mask = (xs - c) ** 2 + (ys - c) ** 2 <= radius**2
    return PixelGrid(np.where(mask, value, 0))


def random_binary(width: int, height: int, seed: int, density: float = 0.45) -> PixelGrid:
    rng = np.random.default_rng(seed)
    return PixelGrid((rng.random((height, width)) < density).astype(np.int64))


# Two disjoint 3×3 blocks; the right one sits higher.
TWO_BLOCKS_ROWS = [
    [0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 1, 1, 1],
    [0, 1, 1, 1, 0, 1, 1, 1],
    [0, 1, 1, 1, 0, 1, 1, 1],
    [0, 1, 1, 1, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0],
]


@pytest.fixture
def two_blocks() -> PixelGrid:
    return PixelGrid.from_rows(TWO_BLOCKS_ROWS)


@pytest.fixture
def square5() -> PixelGrid:
    """5×5 foreground square at x, y in 2..6 of a 9×9 grid."""
    return block_grid(9, 9, [(2, 2, 5, 5)])


@pytest.fixture
def single_pixel() -> PixelGrid:
    return block_grid(5, 5, [(2, 3, 1, 1)])


@pytest.fixture
def gray_ramp() -> PixelGrid:
    return PixelGrid(np.arange(64, dtype=np.int64).reshape(8, 8) * 4)
