"""Lightweight configuration for the guild simulation."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from guildhall.domain.enums import DifficultyLevel


class Settings(BaseSettings):
    """Application settings, read from the environment or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="GUILDHALL_", env_file=".env", env_file_encoding="utf-8"
    )

    saves_dir: Path = Field(default=Path("saves"), description="Where save archives live")
    quicksave_name: str = Field(default="quicksave", description="Slot used by quick save/load")
    default_difficulty: DifficultyLevel = Field(
        default=DifficultyLevel.NORMAL, description="Difficulty for new campaigns"
    )
    starting_roster_size: int = Field(
        default=6, ge=1, description="Adventurers hired when a guild is founded"
    )
    persist_quicksave: bool = Field(
        default=False,
        description="Resume from the quick save at startup and quick-save the live campaign at shutdown",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    settings = Settings()
    settings.saves_dir.mkdir(parents=True, exist_ok=True)
    return settings
