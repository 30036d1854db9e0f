"""Exception hierarchy shared by the core, the engine and the HTTP/CLI surfaces."""

from __future__ import annotations


class ShapeSightError(Exception):
    """Base exception for all ShapeSight errors."""


class InvalidGridError(ShapeSightError, ValueError):
    """A grid is not rectangular, is empty, or is outside the accepted size."""


class DimensionMismatch(ShapeSightError, ValueError):
    """Two operand grids differ in width or height."""

    def __init__(self, first: tuple[int, int], second: tuple[int, int]) -> None:
        self.first = first
        self.second = second
        super().__init__(
            f"Grid dimensions do not match: {first[0]}x{first[1]} vs {second[0]}x{second[1]}"
        )


class TooManyRegions(ShapeSightError):
    """More regions than the label allocator or palette can represent."""


class BoundaryTraceError(ShapeSightError):
    """A boundary walk did not return to its start pixel."""


class PipelineError(ShapeSightError):
    """A plan is malformed or a stage failed."""


class UnknownStage(PipelineError, KeyError):
    """A plan names a stage id that is not registered."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown stage"


class PipelineCancelled(PipelineError):
    """The caller asked the pipeline to stop between stages."""


class StageParameterError(PipelineError, ValueError):
    """A stage was given a parameter of the wrong type or value."""
