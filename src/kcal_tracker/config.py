"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from kcal_tracker.domain.goals import RatioPalette

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    state_file: Path = Path("kcal_tracker.json")
    timezone: str | None = None
    ratio_base_color: str = "rgb(242,244,248)"
    ratio_green_color: str = "rgb(60,185,120)"
    ratio_red_color: str = "rgb(255,90,90)"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def ratio_palette(self) -> RatioPalette:
        """Anchor colors for ratio coloring."""
        return RatioPalette.from_strings(
            self.ratio_base_color, self.ratio_green_color, self.ratio_red_color
        )


def parse_timezone(raw: str | None) -> str | None:
    """Normalize the configured timezone; blank means system local time."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if cleaned in {"", "local"}:
        return None
    return cleaned
