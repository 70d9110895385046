# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Application Configuration
All settings are loaded from environment variables with defaults tuned
for a single tabletop photo. Override via .env or environment.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Segmentation ────────────────────────────────────────────────────────
    # Contours at or below this area (px²) are thresholding noise
    min_contour_area: float = 500.0
    # Bounding boxes within this many px of an image edge mark a border piece
    border_margin_px: int = 10

    # ─── Feature Extraction ──────────────────────────────────────────────────
    # Thread pool size for per-contour analysis; 1 = sequential
    feature_workers: int = 1

    # ─── Matching ────────────────────────────────────────────────────────────
    min_confidence: float = 30.0
    # Prefix of the ranked match list returned to presentation
    display_top_n: int = 10

    # ─── Uploads ─────────────────────────────────────────────────────────────
    upload_max_mb: int = 25

    # ─── Logging ─────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ─── Server ──────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8000

    # ─── Derived helpers ─────────────────────────────────────────────────────
    @property
    def upload_max_bytes(self) -> int:
        return self.upload_max_mb * 1024 * 1024


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached singleton Settings instance."""
    return Settings()
