"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from shapesight.engine.config import PipelineConfig


class Settings(BaseSettings):
    shapesight_env: str = "development"
    shapesight_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Grid limits and rendering
    max_dimension: int = 512
    max_regions: int | None = None
    palette_base: int = 20
    palette_step: int = 5

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def pipeline_config(self, **overrides) -> PipelineConfig:
        values = {
            "max_dimension": self.max_dimension,
            "max_regions": self.max_regions,
            "palette_base": self.palette_base,
            "palette_step": self.palette_step,
        }
        values.update(overrides)
        return PipelineConfig(**values)


settings = Settings()
