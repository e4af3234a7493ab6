"""Configuration management for sketch-evaluator."""

from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Evaluator settings (Pydantic-powered).

    Only ``SKETCH_EVAL_*`` environment variables override the defaults; no
    ``.env`` file is read, so the working directory never changes behaviour.
    """

    model_config = SettingsConfigDict(
        env_prefix="SKETCH_EVAL_",
        env_file=None,
        case_sensitive=False,
        extra="ignore",
    )

    # Timing
    observation_window_ms: int = Field(default=5000, ge=0)
    navigation_timeout_ms: int = Field(default=30000, gt=0)
    wait_until: str = "domcontentloaded"

    # Console messages containing any of these are never reported
    benign_console_patterns: List[str] = Field(default_factory=lambda: ["Failed to load resource"])

    # Browser
    headless: bool = True
    launch_args: List[str] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox"]
    )

    # Application
    log_level: str = "INFO"

    @property
    def observation_window_seconds(self) -> float:
        return self.observation_window_ms / 1000.0


# Global settings instance
settings = Settings()
