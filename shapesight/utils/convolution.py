"""Generic windowed reduction over a grid with an explicit out-of-bounds policy.

For every output pixel a kernel-sized window is centred with the
``dim // 2`` rule. In-grid cells become ``combine(sample, weight)``;
out-of-grid cells become ``out_of_bounds`` as-is. Nothing is reflected or
edge-replicated. ``reduce`` folds the window to one value, which is then
truncated toward zero and clamped to a sample.

The window walk is delegated to ``scipy.ndimage.generic_filter`` over a
float copy padded with NaN: samples are integers, so NaN marks exactly the
cells that fall outside the grid.
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
from numpy.typing import NDArray
from scipy.ndimage import generic_filter

from shapesight.utils.grid import SAMPLE_MAX, SAMPLE_MIN, PixelGrid
from shapesight.utils.kernels import resolve_kernel

Reducer = Callable[[NDArray[np.float64]], float]
Combiner = Callable[[NDArray[np.float64], NDArray[np.float64]], NDArray[np.float64]]

# Mid-grey bias added to derivative responses so negative slopes stay visible.
DERIVATIVE_BIAS = 127


def kernel_sum(cells: NDArray[np.float64]) -> float:
    return float(np.sum(cells))


def derivative_sum(cells: NDArray[np.float64]) -> float:
    return float(np.sum(cells)) + DERIVATIVE_BIAS


def kernel_min(cells: NDArray[np.float64]) -> float:
    return float(np.min(cells))


def kernel_max(cells: NDArray[np.float64]) -> float:
    return float(np.max(cells))


REDUCERS: dict[str, Reducer] = {
    "sum": kernel_sum,
    "derivative": derivative_sum,
    "min": kernel_min,
    "max": kernel_max,
}


def multiply(samples: NDArray[np.float64], weights: NDArray[np.float64]) -> NDArray[np.float64]:
    return samples * weights


def select(sentinel: float) -> Combiner:
    """Keep the sample where the weight is 1, otherwise use ``sentinel``."""

    def _select(samples: NDArray[np.float64], weights: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.where(weights == 1, samples, sentinel)

    return _select


def resolve_reducer(reduce: str | Reducer) -> Reducer:
    if callable(reduce):
        return reduce
    try:
        return REDUCERS[reduce]
    except KeyError:
        raise ValueError(
            f"Unknown reducer '{reduce}' (known: {', '.join(sorted(REDUCERS))})"
        ) from None


def to_samples(values: NDArray[np.float64]) -> NDArray[np.int64]:
    """Truncate toward zero and clamp to [0, 255]. -inf/NaN → 0, +inf → 255."""
    out = np.array(values, dtype=np.float64, copy=True)
    out[np.isnan(out)] = SAMPLE_MIN
    out[np.isposinf(out)] = SAMPLE_MAX
    out[np.isneginf(out)] = SAMPLE_MIN
    return np.clip(np.trunc(out), SAMPLE_MIN, SAMPLE_MAX).astype(np.int64)


def apply_kernel(
    grid: PixelGrid,
    kernel: str | NDArray | list[list[float]],
    reduce: str | Reducer,
    combine: Combiner = multiply,
    out_of_bounds: float = 0.0,
) -> PixelGrid:
    """Run ``reduce`` over every kernel window of ``grid``; returns a new grid."""
    weights_2d = resolve_kernel(kernel)
    reducer = resolve_reducer(reduce)
    weights = weights_2d.ravel()

    def _window(values: NDArray[np.float64]) -> float:
        inside = ~np.isnan(values)
        cells = np.full(values.shape, out_of_bounds, dtype=np.float64)
        cells[inside] = combine(values[inside], weights[inside])
        return reducer(cells)

    reduced = generic_filter(
        grid.samples.astype(np.float64),
        _window,
        size=weights_2d.shape,
        mode="constant",
        cval=np.nan,
    )
    return grid.with_samples(to_samples(reduced))
