"""Tracker and pipeline configuration."""
from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class TrackerConfig:
    """Matching and lifecycle thresholds for SimpleTracker."""

    iou_threshold: float = 0.3  # acceptance cutoff for a track/detection pair
    max_age: int = 30  # frames a track survives unmatched before removal
    min_hits: int = 1  # matched frames required for "confirmed"

    def __post_init__(self) -> None:
        if isinstance(self.iou_threshold, bool) or not isinstance(
            self.iou_threshold, (int, float)
        ):
            raise ValueError(f"iou_threshold must be a number, got {self.iou_threshold!r}")
        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError(f"iou_threshold must be in [0, 1], got {self.iou_threshold}")

        if isinstance(self.max_age, bool) or not isinstance(self.max_age, int):
            raise ValueError(f"max_age must be an integer, got {self.max_age!r}")
        if self.max_age < 0:
            raise ValueError(f"max_age must be >= 0, got {self.max_age}")

        if isinstance(self.min_hits, bool) or not isinstance(self.min_hits, int):
            raise ValueError(f"min_hits must be an integer, got {self.min_hits!r}")
        if self.min_hits < 1:
            raise ValueError(f"min_hits must be >= 1, got {self.min_hits}")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    # Tracker
    iou_threshold: float = Field(default=0.3)
    max_age: int = Field(default=30)
    min_hits: int = Field(default=1)

    # Detector
    model_path: str = Field(default="yolo11s.pt", description="Ultralytics weights file")
    confidence: float = Field(default=0.5)

    # Persistence (empty disables the sink)
    output_path: str = Field(default="")

    # Logging
    log_format: str = Field(default="console")
    log_level: str = Field(default="INFO")


def build_config(settings: Settings) -> TrackerConfig:
    """Build TrackerConfig from Settings."""
    return TrackerConfig(
        iou_threshold=settings.iou_threshold,
        max_age=settings.max_age,
        min_hits=settings.min_hits,
    )
