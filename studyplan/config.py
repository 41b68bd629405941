"""
Configuration settings for the study planner.

Uses Pydantic Settings for environment variable management with .env file support.
All variables are prefixed with STUDYPLAN_ (e.g. STUDYPLAN_DAILY_HOURS=3).
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="STUDYPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".studyplan",
        description="Directory holding the JSON state files",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Session Planner
    # ========================================
    daily_hours: float = Field(
        default=2.0,
        ge=0,
        description="Default study hours per day",
    )
    preferred_time_of_day: Literal["morning", "afternoon", "evening", "distributed"] = Field(
        default="distributed",
        description="Default session placement policy",
    )
    count_end_day: bool = Field(
        default=False,
        description="Count the end date itself when sizing the total hour budget",
    )
    morning_start_hour: int = Field(default=9, ge=0, le=23)
    afternoon_start_hour: int = Field(default=13, ge=0, le=23)
    evening_start_hour: int = Field(default=18, ge=0, le=23)
    distributed_start_hour: int = Field(default=9, ge=0, le=23)
    distributed_step_hours: int = Field(default=4, ge=0)
    distributed_window_hours: int = Field(default=12, ge=1, le=24)

    # ========================================
    # Spaced Repetition (SM-2)
    # ========================================
    initial_ease_factor: float = Field(default=2.5, ge=1.3)
    minimum_ease_factor: float = Field(default=1.3, gt=0)
    graduation_interval_days: int = Field(default=6, ge=1)
    ease_bonus: float = Field(default=0.1, ge=0)
    ease_penalty: float = Field(default=0.2, ge=0)

    # ========================================
    # Study-Time Optimizer
    # ========================================
    morning_bucket_start: int = Field(default=5, ge=0, le=23)
    afternoon_bucket_start: int = Field(default=12, ge=0, le=23)
    evening_bucket_start: int = Field(default=18, ge=0, le=23)
    min_metrics_for_time_of_day: int = Field(default=5, ge=1)
    distributed_threshold: float = Field(
        default=10.0,
        description="Bucket averages closer than this (pairwise) recommend 'distributed'",
    )
    history_blend: float = Field(
        default=0.7,
        ge=0,
        le=1,
        description="Share of the learned duration in the blended prediction",
    )
    hours_per_difficulty: float = Field(default=0.5, gt=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
