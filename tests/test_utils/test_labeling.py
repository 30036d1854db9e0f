"""Tests for connected-component labeling and the label palette."""

import numpy as np
import pytest
from scipy import ndimage

from shapesight.errors import TooManyRegions
from shapesight.utils.grid import PixelGrid, unique_labels
from shapesight.utils.labeling import LabelAllocator, LabelPalette, label_components, render_labels
from shapesight.utils.moments import areas
from tests.conftest import random_binary


def test_two_blocks(two_blocks):
    labels, count = label_components(two_blocks)
    assert count == 2
    assert unique_labels(labels) == [1, 2]
    assert areas(labels) == {1: 9, 2: 9}
    # Left block is met first in the column-major scan
    assert labels.at(1, 2) == 1
    assert labels.at(5, 1) == 2


def test_diagonal_pixels_are_separate():
    grid = PixelGrid.from_rows([[1, 0], [0, 1]])
    _, count = label_components(grid)
    assert count == 2


def test_background_is_untouched(two_blocks):
    labels, _ = label_components(two_blocks)
    assert labels.count(0) == two_blocks.count(0)


@pytest.mark.parametrize("seed", range(5))
def test_area_sum_equals_foreground(seed):
    grid = random_binary(23, 17, seed)
    labels, count = label_components(grid)
    total = sum(areas(labels).values())
    assert total == grid.count(1)
    assert len(unique_labels(labels)) == count


@pytest.mark.parametrize("seed", range(5))
def test_matches_scipy_on_transpose(seed):
    grid = random_binary(31, 19, seed)
    labels, count = label_components(grid)
    # scipy scans row-major; the transpose turns that into our x-outer order
    reference, n = ndimage.label(grid.samples.T)
    assert count == n
    assert np.array_equal(labels.samples.T, reference)


def test_custom_foreground():
    grid = PixelGrid.from_rows([[255, 255, 0, 255]])
    labels, count = label_components(grid, foreground=255)
    assert count == 2
    assert labels.to_rows() == [[1, 1, 0, 2]]


def test_non_foreground_becomes_background():
    grid = PixelGrid.from_rows([[1, 0, 1, 0, 2], [3, 3, 0, 0, 2]])
    labels, count = label_components(grid)
    assert count == 2
    assert labels.to_rows() == [[1, 0, 2, 0, 0], [0, 0, 0, 0, 0]]
    assert areas(labels) == {1: 1, 2: 1}


def test_labels_skip_background_value():
    grid = PixelGrid.from_rows([[7, 3, 7, 3, 7]])
    labels, count = label_components(grid, foreground=7, background=3)
    assert count == 3
    assert labels.to_rows() == [[1, 3, 2, 3, 4]]


def test_allocator_never_issues_reserved():
    allocator = LabelAllocator(start=2, step=2, reserved=4)
    assert [allocator.allocate() for _ in range(3)] == [2, 6, 8]
    assert allocator.issued == [2, 6, 8]
    assert allocator.allocated == 3


def test_allocator_reserved_must_match_background(two_blocks):
    with pytest.raises(ValueError):
        label_components(two_blocks, allocator=LabelAllocator(reserved=5), background=0)


def test_allocator_is_fresh_per_run(two_blocks):
    first, _ = label_components(two_blocks)
    second, _ = label_components(two_blocks)
    assert first == second


def test_allocator_step_and_limit(two_blocks):
    allocator = LabelAllocator(start=10, step=5)
    labels, _ = label_components(two_blocks, allocator=allocator)
    assert unique_labels(labels) == [10, 15]
    assert allocator.issued == [10, 15]

    with pytest.raises(TooManyRegions):
        label_components(two_blocks, allocator=LabelAllocator(limit=1))


def test_allocator_rejects_non_positive():
    with pytest.raises(ValueError):
        LabelAllocator(start=0)


def test_palette_odometer():
    palette = LabelPalette()
    assert len(palette.levels) == 48
    assert palette.capacity == 48**3
    assert palette.color_for(0) == (20, 20, 20)
    assert palette.color_for(1) == (25, 20, 20)
    assert palette.color_for(47) == (255, 20, 20)
    assert palette.color_for(48) == (20, 25, 20)
    assert palette.color_for(48 * 48) == (20, 20, 25)


def test_palette_exhaustion():
    palette = LabelPalette(base=250, step=5)
    assert palette.capacity == 8
    with pytest.raises(TooManyRegions):
        palette.color_for(8)


def test_render_labels(two_blocks):
    labels, _ = label_components(two_blocks)
    rgb = render_labels(labels)
    assert rgb.shape == (6, 8, 3)
    assert rgb.dtype == np.uint8
    assert tuple(rgb[0, 0]) == (0, 0, 0)
    assert tuple(rgb[2, 1]) == (20, 20, 20)
    assert tuple(rgb[1, 5]) == (25, 20, 20)


def test_render_too_many_labels():
    grid = PixelGrid.from_rows([[1, 0, 2, 0, 3]])
    with pytest.raises(TooManyRegions):
        render_labels(grid, LabelPalette(base=255, step=1))


def test_all_background_has_no_labels():
    labels, count = label_components(PixelGrid.zeros(4, 3))
    assert count == 0
    assert unique_labels(labels) == []
