"""Grayscale morphology built on apply_kernel.

Only the structuring element's "1" cells take part. Excluded and
out-of-grid cells are replaced by an infinite sentinel that can never win
the max (dilate) or min (erode), so objects touching the frame are neither
grown nor eaten by the border.
"""

from __future__ import annotations

import math

from numpy.typing import NDArray

from shapesight.utils.convolution import apply_kernel, kernel_max, kernel_min, select
from shapesight.utils.grid import PixelGrid

StructuringElement = str | NDArray | list[list[float]]


def dilate(grid: PixelGrid, element: StructuringElement) -> PixelGrid:
    """Each sample becomes the max over the element's neighbourhood."""
    return apply_kernel(
        grid,
        element,
        reduce=kernel_max,
        combine=select(-math.inf),
        out_of_bounds=-math.inf,
    )


def erode(grid: PixelGrid, element: StructuringElement) -> PixelGrid:
    """Each sample becomes the min over the element's neighbourhood."""
    return apply_kernel(
        grid,
        element,
        reduce=kernel_min,
        combine=select(math.inf),
        out_of_bounds=math.inf,
    )


def morphological_close(grid: PixelGrid, element: StructuringElement) -> PixelGrid:
    """Dilate then erode, to bridge small gaps between nearby blobs."""
    return erode(dilate(grid, element), element)


def morphological_open(grid: PixelGrid, element: StructuringElement) -> PixelGrid:
    """Erode then dilate, to drop specks smaller than the element."""
    return dilate(erode(grid, element), element)
