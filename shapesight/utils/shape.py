"""Shape descriptors — perimeter, circularity, rotated bounding box, rectangularity.

The rotated bounding box is rebuilt the simple way: boundary pixels are
moved into the principal-axis frame, their extents are measured there, and
an axis-aligned rectangle of that size is anchored back at the centroid in
image coordinates. The rectangle is not rotated back, so it only
approximates an oriented box. Extents count pixels inclusively, which gives
a solid w×h block a w×h box.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

from shapesight.utils.chain_code import (
    ChainCode,
    chain_codes,
    chain_to_points,
    first_pixels,
    perimeter,
)
from shapesight.utils.grid import MAX_DIMENSION, PixelGrid
from shapesight.utils.moments import MomentSummary, summarize


@dataclass(frozen=True)
class BoundingBox:
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class ShapeDescriptor:
    label: int
    area: int
    centroid: tuple[float, float]
    perimeter: int
    circularity: float
    orientation: float
    bounding_box: BoundingBox | None
    rectangularity: float | None
    start: tuple[int, int]
    chain_code: ChainCode = ()

    def to_dict(self) -> dict:
        data = asdict(self)
        data["chain_code"] = list(self.chain_code)
        return data


def circularity(area: int, perimeter: int) -> float:
    """4π·area / perimeter². A zero perimeter gives inf rather than raising."""
    if perimeter == 0:
        return math.inf if area > 0 else math.nan
    return 4.0 * math.pi * area / (perimeter**2)


def box_angle(summary: MomentSummary) -> float:
    """Angle to rotate into for the bounding box.

    Isotropic regions (μ20 == μ02, μ11 == 0) have no principal axis; the image
    axes are used. Other non-finite angles are passed through.
    """
    if math.isfinite(summary.angle):
        return summary.angle
    if summary.mu11 == 0 and summary.mu20 == summary.mu02:
        return 0.0
    return summary.angle


def rotated_bounding_box(
    border: list[tuple[int, int]],
    centroid: tuple[float, float],
    angle: float,
    max_dim: int = MAX_DIMENSION,
) -> BoundingBox | None:
    """Box around ``border`` measured in the frame rotated by ``angle``.

    Returns None when the inputs are non-finite, the border is empty, or an
    extent never moves off its start value.
    """
    cx, cy = centroid
    if not border or not all(math.isfinite(v) for v in (cx, cy, angle)):
        return None

    cos_t = math.cos(angle)
    sin_t = math.sin(angle)
    min_x = min_y = max_dim
    max_x = max_y = 0

    for px, py in border:
        x = px - cx
        y = py - cy
        # int() truncates toward zero.
        rx = int(cos_t * x + sin_t * y)
        ry = int(-sin_t * x + cos_t * y)
        min_x = min(min_x, rx)
        max_x = max(max_x, rx)
        min_y = min(min_y, ry)
        max_y = max(max_y, ry)

    if min_x == max_dim or min_y == max_dim:
        return None

    return BoundingBox(
        x=min_x + int(cx),
        y=min_y + int(cy),
        width=abs(min_x) + max_x + 1,
        height=abs(min_y) + max_y + 1,
    )


def rectangularity(area: int, box: BoundingBox | None) -> float | None:
    if box is None or box.area == 0:
        return None
    return area / box.area


def describe_regions(
    label_grid: PixelGrid,
    background: int = 0,
    max_dim: int = MAX_DIMENSION,
) -> dict[int, ShapeDescriptor]:
    """Full descriptor for every label, in first-seen order."""
    codes = chain_codes(label_grid, background)
    starts = first_pixels(label_grid, background)
    moments = summarize(label_grid, background)

    result: dict[int, ShapeDescriptor] = {}
    for label, chain in codes.items():
        m = moments[label]
        start = starts[label]
        box = rotated_bounding_box(chain_to_points(start, chain), m.centroid, box_angle(m), max_dim)
        result[label] = ShapeDescriptor(
            label=label,
            area=m.area,
            centroid=m.centroid,
            perimeter=perimeter(chain),
            circularity=circularity(m.area, perimeter(chain)),
            orientation=m.angle,
            bounding_box=box,
            rectangularity=rectangularity(m.area, box),
            start=start,
            chain_code=chain,
        )
    return result
