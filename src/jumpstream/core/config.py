"""Application configuration via Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Jump detection engine parameters."""

    model_config = SettingsConfigDict(env_prefix="JUMP_")

    min_sample_interval_ms: float = Field(default=16.0, ge=0.0)
    jump_threshold_px: float = Field(default=20.0, ge=0.0)
    ground_tolerance_band_px: float = Field(default=100.0, gt=0.0)
    min_flight_time_seconds: float = Field(default=0.1, ge=0.0)
    buffer_capacity: int = Field(default=30, ge=1)
    peak_lookback: int = Field(default=15, ge=1)
    low_confidence_sum_threshold: float = Field(default=0.6, ge=0.0)
    persist_best_stats_across_sessions: bool = True
    foot_combine_mode: Literal["min", "mean"] = "min"

    @model_validator(mode="after")
    def _check_lookback(self) -> "EngineSettings":
        if self.peak_lookback > self.buffer_capacity:
            raise ValueError("peak_lookback cannot exceed buffer_capacity")
        return self


class PoseSettings(BaseSettings):
    """MediaPipe pose estimation settings."""

    model_config = SettingsConfigDict(env_prefix="POSE_")

    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    model_path: str | None = None


class ChartSettings(BaseSettings):
    """Foot-height chart feed settings."""

    model_config = SettingsConfigDict(env_prefix="CHART_")

    flush_interval_s: float = Field(default=1.0, gt=0.0)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    file: str | None = None


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    engine: EngineSettings = Field(default_factory=EngineSettings)
    pose: PoseSettings = Field(default_factory=PoseSettings)
    chart: ChartSettings = Field(default_factory=ChartSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance."""
    return Settings()
