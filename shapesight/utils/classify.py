"""Range-table shape classification from (circularity, rectangularity).

A value matches a class when it lies inside both of the class's inclusive
ranges. Circularity narrows the candidates first; the first candidate (in
table order) whose rectangularity range also matches wins. Overlapping
tables are therefore resolved by table order. Non-finite or missing values
match nothing, and unmatched regions stay unclassified.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from shapesight.utils.shape import ShapeDescriptor

Range = tuple[float, float]


class ShapeClass(enum.IntEnum):
    CIRCLE = 0
    TRIANGLE = 1
    RECTANGLE = 2


@dataclass(frozen=True)
class ClassRanges:
    shape: ShapeClass
    circularity: Range
    rectangularity: Range


# Empirical ranges. Rectangle rectangularity runs past 1.0 to absorb
# bounding-box truncation.
DEFAULT_RANGES: tuple[ClassRanges, ...] = (
    ClassRanges(ShapeClass.CIRCLE, (0.86, 1.00), (0.75, 0.85)),
    ClassRanges(ShapeClass.TRIANGLE, (0.78, 0.85), (0.55, 0.65)),
    ClassRanges(ShapeClass.RECTANGLE, (0.50, 0.70), (0.95, 1.05)),
)


def _within(value: float, bounds: Range) -> bool:
    low, high = bounds
    return math.isfinite(value) and low <= value <= high


def classify(
    circ: float,
    rect: float | None,
    ranges: Sequence[ClassRanges] = DEFAULT_RANGES,
) -> ShapeClass | None:
    """Return the matching class, or None."""
    if rect is None:
        return None
    candidates = [r for r in ranges if _within(circ, r.circularity)]
    for candidate in candidates:
        if _within(rect, candidate.rectangularity):
            return candidate.shape
    return None


def classify_regions(
    descriptors: Mapping[int, ShapeDescriptor],
    ranges: Sequence[ClassRanges] = DEFAULT_RANGES,
) -> dict[int, ShapeClass]:
    """Label → class for every region that matches; others are absent."""
    result: dict[int, ShapeClass] = {}
    for label, desc in descriptors.items():
        shape = classify(desc.circularity, desc.rectangularity, ranges)
        if shape is not None:
            result[label] = shape
    return result


def parse_ranges(table: Sequence[Mapping]) -> tuple[ClassRanges, ...]:
    """Build a range table from dicts like
    ``{"shape": "circle", "circularity": [lo, hi], "rectangularity": [lo, hi]}``.
    """
    parsed = []
    for row in table:
        shape = row["shape"]
        if isinstance(shape, str):
            shape = ShapeClass[shape.upper()]
        parsed.append(
            ClassRanges(
                ShapeClass(shape),
                (float(row["circularity"][0]), float(row["circularity"][1])),
                (float(row["rectangularity"][0]), float(row["rectangularity"][1])),
            )
        )
    return tuple(parsed)
