"""Tests for geometric moments."""

import math

import numpy as np
import pytest
from skimage.measure import moments as sk_moments

from shapesight.utils.grid import PixelGrid
from shapesight.utils.labeling import label_components
from shapesight.utils.moments import (
    area,
    areas,
    central_moment,
    centroid,
    principal_axis_angle,
    raw_moment,
    raw_moments,
    summarize,
)
from tests.conftest import block_grid, random_binary


def test_square5_moments(square5):
    assert area(square5, 1) == 25
    assert centroid(square5, 1) == (4.0, 4.0)
    assert central_moment(square5, 1, 1, 1) == 0.0
    assert central_moment(square5, 1, 2, 0) == 50.0
    assert central_moment(square5, 1, 0, 2) == 50.0


def test_isotropic_angle_is_nan(square5):
    assert math.isnan(principal_axis_angle(square5, 1))


def test_horizontal_bar_angle_is_zero():
    grid = block_grid(5, 3, [(0, 1, 5, 1)])
    assert principal_axis_angle(grid, 1) == 0.0


def test_diagonal_angle():
    grid = PixelGrid.from_rows([
        [1, 0, 0],
        [0, 1, 0],
        [0, 0, 1],
    ])
    # μ20 == μ02 and μ11 > 0: atan(+inf) / 2
    assert principal_axis_angle(grid, 1) == pytest.approx(math.pi / 4)


def test_centroid_of_missing_label():
    with pytest.raises(ValueError):
        centroid(PixelGrid.zeros(3, 3), 1)


def test_raw_moments_are_exact():
    arr = np.zeros((501, 501), dtype=np.int64)
    arr[500, 500] = 1
    grid = PixelGrid(arr)
    assert raw_moment(grid, 1, 5, 5) == 500**10


@pytest.mark.parametrize("seed", range(3))
def test_raw_moments_match_skimage(seed):
    labels, _ = label_components(random_binary(16, 12, seed))
    for p in range(3):
        for q in range(3):
            ours = raw_moments(labels, p, q)
            for label, value in ours.items():
                mask = (labels.samples == label).astype(np.float64)
                # skimage indexes M[row order, column order]
                reference = sk_moments(mask, order=2)[q, p]
                assert value == pytest.approx(reference)


def test_per_label_tables_follow_first_seen_order(two_blocks):
    labels, _ = label_components(two_blocks)
    assert list(areas(labels)) == [1, 2]
    summary = summarize(labels)
    assert summary[1].centroid == (2.0, 3.0)
    assert summary[2].centroid == (6.0, 2.0)
    assert summary[1].area == 9
