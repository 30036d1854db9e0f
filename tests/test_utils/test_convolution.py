"""Tests for apply_kernel and the named kernels."""

import numpy as np
import pytest

from shapesight.utils.convolution import apply_kernel, to_samples
from shapesight.utils.grid import PixelGrid
from shapesight.utils.kernels import KERNELS, center_offset, resolve_kernel


def test_box_sum_with_zero_border():
    grid = PixelGrid(np.ones((3, 3), dtype=np.int64))
    out = apply_kernel(grid, "square3", "sum")
    assert out.to_rows() == [[4, 6, 4], [6, 9, 6], [4, 6, 4]]


def test_out_of_bounds_value_used_as_is():
    grid = PixelGrid.zeros(3, 3)
    out = apply_kernel(grid, "square3", "sum", out_of_bounds=10)
    # corner windows see 5 outside cells, edges 3, centre none
    assert out.to_rows() == [[50, 30, 50], [30, 0, 30], [50, 30, 50]]


def test_kernel_is_not_flipped():
    grid = PixelGrid.from_rows([[1, 2, 3]])
    out = apply_kernel(grid, [[0, 0, 1]], "sum")
    assert out.to_rows() == [[2, 3, 0]]


def test_derivative_adds_mid_grey_bias():
    grid = PixelGrid.from_rows([[0, 10, 20, 30]])
    out = apply_kernel(grid, "dx", "derivative")
    assert out.to_rows() == [[132, 137, 137, 117]]


def test_result_is_clamped():
    grid = PixelGrid(np.full((3, 3), 200, dtype=np.int64))
    assert apply_kernel(grid, "square3", "sum").at(1, 1) == 255


def test_to_samples_truncates_and_clamps():
    values = np.array([[1.9, -1.5, np.inf], [-np.inf, np.nan, 300.0]])
    assert to_samples(values).tolist() == [[1, 0, 255], [0, 0, 255]]


def test_custom_reducer():
    grid = PixelGrid.from_rows([[1, 5, 2]])
    out = apply_kernel(grid, [[1, 1, 1]], lambda cells: float(np.count_nonzero(cells)))
    assert out.to_rows() == [[2, 3, 2]]


def test_unknown_kernel_and_reducer():
    grid = PixelGrid.zeros(2, 2)
    with pytest.raises(ValueError):
        apply_kernel(grid, "hexagon", "sum")
    with pytest.raises(ValueError):
        apply_kernel(grid, "square3", "median")


def test_named_kernels_are_read_only():
    for kernel in KERNELS.values():
        assert not kernel.flags.writeable


def test_center_offset():
    assert center_offset(resolve_kernel("dx")) == (0, 1)
    assert center_offset(resolve_kernel("diamond9")) == (4, 4)
    assert center_offset(np.ones((2, 4))) == (1, 2)
