"""Geometric moments over labeled regions. No engine imports.

Coordinates are (i, j) = (x, y). Raw moments are accumulated as exact
integers, each factor raised separately; central moments and the
principal-axis angle are floats.

``principal_axis_angle`` evaluates 0.5·atan(2·μ11 / (μ20 − μ02)) with IEEE
semantics: when μ20 == μ02 it yields ±π/4 (μ11 ≠ 0) or NaN (μ11 == 0)
instead of raising. Callers decide what a non-finite angle means.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from shapesight.utils.grid import PixelGrid, first_occurrences

Coords = tuple[NDArray[np.int64], NDArray[np.int64]]


@dataclass(frozen=True)
class MomentSummary:
    """Per-label moment digest used by the shape stages."""

    label: int
    area: int
    centroid: tuple[float, float]
    mu11: float
    mu20: float
    mu02: float
    angle: float


def label_coordinates(label_grid: PixelGrid, label: int) -> Coords:
    """(xs, ys) of every pixel carrying ``label``."""
    ys, xs = np.nonzero(label_grid.samples == label)
    return xs.astype(np.int64), ys.astype(np.int64)


def label_pixels(label_grid: PixelGrid, background: int = 0) -> dict[int, Coords]:
    """Coordinates grouped per label, in first-seen scan order."""
    samples = label_grid.samples
    ys, xs = np.nonzero(samples != background)
    values = samples[ys, xs]
    order = np.argsort(values, kind="stable")
    values, xs, ys = values[order], xs[order], ys[order]
    uniq, starts = np.unique(values, return_index=True)
    bounds = list(starts[1:]) + [len(values)]
    grouped = {
        int(v): (xs[s:e].astype(np.int64), ys[s:e].astype(np.int64))
        for v, s, e in zip(uniq, starts, bounds)
    }
    return {label: grouped[label] for label in first_occurrences(label_grid, background)}


def _raw(coords: Coords, p: int, q: int) -> int:
    xs, ys = coords
    # Object dtype keeps Python ints, so high orders cannot overflow.
    terms = xs.astype(object) ** p * ys.astype(object) ** q
    return int(terms.sum()) if len(terms) else 0


def _central(coords: Coords, centroid: tuple[float, float], p: int, q: int) -> float:
    xs, ys = coords
    xc, yc = centroid
    return float(np.sum((xs - xc) ** p * (ys - yc) ** q))


def _centroid(coords: Coords) -> tuple[float, float]:
    area = _raw(coords, 0, 0)
    if area == 0:
        raise ValueError("Centroid of an empty region is undefined")
    return (_raw(coords, 1, 0) / area, _raw(coords, 0, 1) / area)


def _angle(mu11: float, mu20: float, mu02: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = np.float64(2.0 * mu11) / np.float64(mu20 - mu02)
        return float(0.5 * np.arctan(ratio))


def raw_moment(label_grid: PixelGrid, label: int, p: int, q: int) -> int:
    """Σ i^p · j^q over the pixels of ``label``."""
    return _raw(label_coordinates(label_grid, label), p, q)


def area(label_grid: PixelGrid, label: int) -> int:
    return raw_moment(label_grid, label, 0, 0)


def centroid(label_grid: PixelGrid, label: int) -> tuple[float, float]:
    """(m10 / m00, m01 / m00). Raises ValueError if the label is absent."""
    return _centroid(label_coordinates(label_grid, label))


def central_moment(label_grid: PixelGrid, label: int, p: int, q: int) -> float:
    coords = label_coordinates(label_grid, label)
    return _central(coords, _centroid(coords), p, q)


def principal_axis_angle(label_grid: PixelGrid, label: int) -> float:
    """Axis of least moment of inertia, in radians. May be NaN."""
    coords = label_coordinates(label_grid, label)
    c = _centroid(coords)
    return _angle(_central(coords, c, 1, 1), _central(coords, c, 2, 0), _central(coords, c, 0, 2))


def raw_moments(label_grid: PixelGrid, p: int, q: int, background: int = 0) -> dict[int, int]:
    """Raw moment of every label, in first-seen order."""
    return {
        label: _raw(coords, p, q)
        for label, coords in label_pixels(label_grid, background).items()
    }


def areas(label_grid: PixelGrid, background: int = 0) -> dict[int, int]:
    return raw_moments(label_grid, 0, 0, background)


def central_moments(
    label_grid: PixelGrid, p: int, q: int, background: int = 0
) -> dict[int, float]:
    return {
        label: _central(coords, _centroid(coords), p, q)
        for label, coords in label_pixels(label_grid, background).items()
    }


def summarize(label_grid: PixelGrid, background: int = 0) -> dict[int, MomentSummary]:
    """Area, centroid, second-order central moments and angle per label."""
    result: dict[int, MomentSummary] = {}
    for label, coords in label_pixels(label_grid, background).items():
        c = _centroid(coords)
        mu11 = _central(coords, c, 1, 1)
        mu20 = _central(coords, c, 2, 0)
        mu02 = _central(coords, c, 0, 2)
        result[label] = MomentSummary(
            label=label,
            area=_raw(coords, 0, 0),
            centroid=c,
            mu11=mu11,
            mu20=mu20,
            mu02=mu02,
            angle=_angle(mu11, mu20, mu02),
        )
    return result
