"""Named kernels and structuring elements.

Arrays are indexed [row, col] like grids, so a kernel of shape (kh, kw)
spans kw pixels along x and kh along y. Centre offset is dim // 2 on each
axis; even-sized kernels therefore lean towards the top-left.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def _k(rows: list[list[float]]) -> NDArray[np.float64]:
    arr = np.array(rows, dtype=np.float64)
    arr.setflags(write=False)
    return arr


# Central differences, used with derivative_sum.
DX = _k([[-0.5, 0.0, 0.5]])
DY = _k([[-0.5], [0.0], [0.5]])

SQUARE_3 = _k([[1] * 3 for _ in range(3)])
SQUARE_5 = _k([[1] * 5 for _ in range(5)])

CROSS_3 = _k([
    [0, 1, 0],
    [1, 1, 1],
    [0, 1, 0],
])

CROSS_5 = _k([
    [0, 0, 1, 0, 0],
    [0, 0, 1, 0, 0],
    [1, 1, 1, 1, 1],
    [0, 0, 1, 0, 0],
    [0, 0, 1, 0, 0],
])

DIAMOND_5 = _k([
    [0, 0, 1, 0, 0],
    [0, 1, 1, 1, 0],
    [1, 1, 1, 1, 1],
    [0, 1, 1, 1, 0],
    [0, 0, 1, 0, 0],
])

DIAMOND_9 = _k([
    [0, 0, 0, 0, 1, 0, 0, 0, 0],
    [0, 0, 0, 1, 1, 1, 0, 0, 0],
    [0, 0, 1, 1, 1, 1, 1, 0, 0],
    [0, 1, 1, 1, 1, 1, 1, 1, 0],
    [1, 1, 1, 1, 1, 1, 1, 1, 1],
    [0, 1, 1, 1, 1, 1, 1, 1, 0],
    [0, 0, 1, 1, 1, 1, 1, 0, 0],
    [0, 0, 0, 1, 1, 1, 0, 0, 0],
    [0, 0, 0, 0, 1, 0, 0, 0, 0],
])

KERNELS: dict[str, NDArray[np.float64]] = {
    "dx": DX,
    "dy": DY,
    "square3": SQUARE_3,
    "square5": SQUARE_5,
    "cross3": CROSS_3,
    "cross5": CROSS_5,
    "diamond5": DIAMOND_5,
    "diamond9": DIAMOND_9,
}


def center_offset(kernel: NDArray) -> tuple[int, int]:
    """(row, col) offset of the kernel centre."""
    kh, kw = kernel.shape
    return kh // 2, kw // 2


def resolve_kernel(kernel: str | list[list[float]] | NDArray) -> NDArray[np.float64]:
    """Accept a kernel name, nested lists, or an array."""
    if isinstance(kernel, str):
        try:
            return KERNELS[kernel]
        except KeyError:
            raise ValueError(
                f"Unknown kernel '{kernel}' (known: {', '.join(sorted(KERNELS))})"
            ) from None
    arr = np.asarray(kernel, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[0] == 0 or arr.shape[1] == 0:
        raise ValueError(f"Kernel must be a non-empty 2-D array, got shape {arr.shape}")
    return arr
