"""Runtime settings loaded from the environment or a .env file."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PATH = str(Path.home() / ".study_rounds" / "study_rounds.db")


class Settings(BaseSettings):
    """Tunable constants for planning and evaluation.

    Every planner takes these as explicit arguments as well; the settings
    object only supplies the defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="STUDY_ROUNDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    db_path: str = DEFAULT_DB_PATH
    user_id: str = "local"
    log_level: str = "WARNING"

    # Round planning
    chunk_size: int = Field(10, gt=0)
    hard_threshold: float = 3.5
    default_difficulty: float = 3.0

    # Performance metrics
    max_difficulty: int = Field(5, ge=1)
    excellent_threshold: float = 0.85
    good_threshold: float = 0.65
    fair_threshold: float = 0.40

    # Scheduling
    legacy_review_days: int = 7
    study_hours_per_day: float = 8.0
    recent_trend_days: int = 7


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
