"""Application configuration from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = "info"

    # Segmentation defaults (32x32 grid)
    grid_exponent: int = 5
    threshold: float = 800.0
    traversal: str = "dither"
    selection: Literal["last", "minimum"] = "last"

    # Overlay output
    output: str = "segmented.tif"
    overlay_scale: int = 8

    # HTTP API
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = SettingsConfigDict(
        env_prefix="REGIONGROW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
