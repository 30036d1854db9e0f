"""AnalysisContext — the single state object flowing through all stages.

Per-region results → RegionData.features
Whole-image results → AnalysisContext.* (grid, label_grid, classes, rendered)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from shapesight.engine.config import PipelineConfig
from shapesight.utils.chain_code import ChainCode
from shapesight.utils.classify import ShapeClass
from shapesight.utils.grid import PixelGrid
from shapesight.utils.shape import BoundingBox, ShapeDescriptor


@dataclass
class RegionData:
    """Data for one labeled region."""

    label: int
    # First pixel in scan order
    start: tuple[int, int]
    chain_code: ChainCode = ()
    # All computed features go here (keyed by feature name)
    features: dict[str, Any] = field(default_factory=dict)

    def descriptor(self) -> ShapeDescriptor:
        f = self.features
        return ShapeDescriptor(
            label=self.label,
            area=f.get("area", 0),
            centroid=f.get("centroid", (float("nan"), float("nan"))),
            perimeter=f.get("perimeter", len(self.chain_code)),
            circularity=f.get("circularity", float("nan")),
            orientation=f.get("orientation", float("nan")),
            bounding_box=f.get("bounding_box"),
            rectangularity=f.get("rectangularity"),
            start=self.start,
            chain_code=self.chain_code,
        )


@dataclass
class AnalysisContext:
    """Shared state for one analysis run."""

    # Grid as handed in by the loader; never replaced
    source: PixelGrid
    # Current working grid; preprocessing stages replace it
    grid: PixelGrid | None = None
    config: PipelineConfig = field(default_factory=PipelineConfig)

    # --- Labeling ---
    label_grid: PixelGrid | None = None
    label_count: int = 0
    regions: dict[int, RegionData] = field(default_factory=dict)

    # --- Classification / rendering ---
    classes: dict[int, ShapeClass] = field(default_factory=dict)
    rendered: NDArray[np.uint8] | None = None

    # --- Pipeline metadata ---
    completed_stages: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.grid is None:
            self.grid = self.source

    @classmethod
    def from_rows(cls, rows: list[list[int]], config: PipelineConfig | None = None) -> AnalysisContext:
        return cls(source=PixelGrid.from_rows(rows), config=config or PipelineConfig())

    @property
    def num_regions(self) -> int:
        return len(self.regions)

    def require_labels(self) -> PixelGrid:
        if self.label_grid is None:
            raise RuntimeError("No label grid: run the 'label' stage first")
        return self.label_grid

    def descriptors(self) -> dict[int, ShapeDescriptor]:
        return {label: region.descriptor() for label, region in self.regions.items()}

    def get_region(self, label: int) -> RegionData | None:
        return self.regions.get(label)

    def bounding_boxes(self) -> list[BoundingBox]:
        """Boxes of the regions that have one, in label order."""
        return [
            r.features["bounding_box"]
            for r in self.regions.values()
            if r.features.get("bounding_box") is not None
        ]
