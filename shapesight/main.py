"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shapesight.config import settings
from shapesight.engine.pipeline import register_stages

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.shapesight_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="ShapeSight",
        description="Binary image analysis: labeling, boundary chains, moments and shape classes",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import all stage modules to trigger registration
    register_stages()

    from shapesight.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
