"""Pointwise operators — threshold, per-sample map, two-grid combine."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
from numpy.typing import NDArray

from shapesight.errors import DimensionMismatch
from shapesight.utils.grid import SAMPLE_MAX, SAMPLE_MIN, PixelGrid

SamplePredicate = Callable[[NDArray[np.int64]], NDArray[np.bool_]]
BinaryOp = Callable[[NDArray[np.int64], NDArray[np.int64]], NDArray]


def threshold_where(
    grid: PixelGrid,
    predicate: SamplePredicate,
    true_value: int = 1,
    false_value: int = 0,
) -> PixelGrid:
    """Generic threshold: ``predicate`` receives the whole sample array."""
    mask = np.asarray(predicate(grid.samples), dtype=bool)
    return grid.with_samples(np.where(mask, true_value, false_value))


def threshold(grid: PixelGrid, t: int, true_value: int = 1, false_value: int = 0) -> PixelGrid:
    """sample > t → true_value, else false_value. The bound is exclusive."""
    return threshold_where(grid, lambda s: s > t, true_value, false_value)


def threshold_range(
    grid: PixelGrid,
    lo: int,
    hi: int,
    true_value: int = 1,
    false_value: int = 0,
) -> PixelGrid:
    """lo < sample < hi → true_value. Both bounds exclusive."""
    return threshold_where(grid, lambda s: (s > lo) & (s < hi), true_value, false_value)


def map_samples(
    grid: PixelGrid,
    fn: Callable,
    vectorized: bool = False,
) -> PixelGrid:
    """Apply ``fn`` to every sample.

    By default ``fn`` takes and returns a single int. Pass ``vectorized=True``
    when ``fn`` already operates on whole numpy arrays.
    """
    if vectorized:
        out = np.asarray(fn(grid.samples))
    else:
        out = np.vectorize(fn, otypes=[np.int64])(grid.samples)
    if out.shape != grid.samples.shape:
        raise ValueError(f"map function changed grid shape {grid.samples.shape} -> {out.shape}")
    return grid.with_samples(out.astype(np.int64))


def _invert(s: NDArray[np.int64]) -> NDArray[np.int64]:
    return SAMPLE_MAX - s


def _complement(s: NDArray[np.int64]) -> NDArray[np.int64]:
    return 1 - s


def _identity(s: NDArray[np.int64]) -> NDArray[np.int64]:
    return s


# Vectorised maps addressable by name from a plan.
NAMED_MAPS: dict[str, Callable[[NDArray[np.int64]], NDArray[np.int64]]] = {
    "invert": _invert,
    "complement": _complement,
    "identity": _identity,
}


def _clip(values: NDArray) -> NDArray[np.int64]:
    return np.clip(values, SAMPLE_MIN, SAMPLE_MAX)


NAMED_OPS: dict[str, BinaryOp] = {
    "add": lambda a, b: _clip(a + b),
    "subtract": lambda a, b: _clip(a - b),
    "difference": lambda a, b: np.abs(a - b),
    "min": np.minimum,
    "max": np.maximum,
    "and": lambda a, b: ((a != 0) & (b != 0)).astype(np.int64),
    "or": lambda a, b: ((a != 0) | (b != 0)).astype(np.int64),
    "xor": lambda a, b: ((a != 0) ^ (b != 0)).astype(np.int64),
}


def combine(first: PixelGrid, second: PixelGrid, op: BinaryOp | str) -> PixelGrid:
    """Elementwise ``op(first, second)``.

    Raises DimensionMismatch before touching any sample when the grids
    differ in width or height.
    """
    if first.size != second.size:
        raise DimensionMismatch(first.size, second.size)
    if isinstance(op, str):
        try:
            op = NAMED_OPS[op]
        except KeyError:
            raise ValueError(f"Unknown combine op '{op}'") from None
    out = np.asarray(op(first.samples, second.samples))
    return first.with_samples(out.astype(np.int64))
