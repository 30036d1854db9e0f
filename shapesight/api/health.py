"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from shapesight.engine.registry import get_registry
from shapesight.models.responses import HealthResponse, StageInfo

router = APIRouter()

_VERSION = "0.1.0"


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=_VERSION,
        stages_registered=get_registry().count,
    )


@router.get("/stages", response_model=list[StageInfo])
async def stages() -> list[StageInfo]:
    return [
        StageInfo(
            id=spec.id,
            layer=spec.layer.name.lower(),
            requires=list(spec.requires),
            description=spec.description,
        )
        for spec in get_registry().all()
    ]
