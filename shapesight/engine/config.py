"""Pipeline configuration — sentinels, limits and classification tables."""

from __future__ import annotations

from dataclasses import dataclass

from shapesight.utils.classify import DEFAULT_RANGES, ClassRanges
from shapesight.utils.grid import MAX_DIMENSION


@dataclass
class PipelineConfig:
    """Controls how stages interpret grids and what they are allowed to produce."""

    # Background label sentinel and binary foreground value
    background: int = 0
    foreground: int = 1

    # Ingestion limit (both dimensions)
    max_dimension: int = MAX_DIMENSION

    # Label allocation: None = unbounded
    max_regions: int | None = None

    # Render palette (three chained 8-bit channels)
    palette_base: int = 20
    palette_step: int = 5

    # Shape classification table, matched in order
    class_ranges: tuple[ClassRanges, ...] = DEFAULT_RANGES

    # Re-raise the first stage failure instead of recording it and moving on
    fail_fast: bool = True
