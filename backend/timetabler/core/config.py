from functools import lru_cache
import json
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from timetabler.core.exceptions import ConfigurationError
from timetabler.schemas.allocation import (
    DEFAULT_DAYS,
    DEFAULT_TIME_SLOTS,
    AllocationPolicy,
    ScoreWeights,
)


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


def _split_list(value: str) -> list[str]:
    stripped = value.strip()
    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
        except json.JSONDecodeError:
            pass
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    # Resolve to backend/.env so `uvicorn --app-dir backend` works from any cwd.
    model_config = SettingsConfigDict(
        env_file=str(BACKEND_ENV_FILE),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    project_name: str = "Timetabler API"
    api_prefix: str = "/api"

    database_url: str = "sqlite+pysqlite:///./timetabler.db"

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    allocation_days: list[str] = Field(default_factory=lambda: list(DEFAULT_DAYS))
    allocation_time_slots: list[int] = Field(default_factory=lambda: list(DEFAULT_TIME_SLOTS))
    allocation_day_start_hour: int = 8
    allocation_day_end_hour: int = 18
    allocation_enforce_lecturer_break: bool = True
    allocation_weights: ScoreWeights = Field(default_factory=ScoreWeights)
    allocation_lock_timeout_seconds: float = 30.0

    @field_validator("cors_origins", "allocation_days", mode="before")
    @classmethod
    def split_string_lists(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return _split_list(value)
        return value

    @field_validator("allocation_time_slots", mode="before")
    @classmethod
    def split_time_slots(cls, value: str | list[int]) -> list[int]:
        if isinstance(value, str):
            return [int(item) for item in _split_list(value)]
        return value

    def allocation_policy(self) -> AllocationPolicy:
        try:
            return AllocationPolicy(
                days=self.allocation_days,
                time_slots=self.allocation_time_slots,
                day_start_hour=self.allocation_day_start_hour,
                day_end_hour=self.allocation_day_end_hour,
                enforce_lecturer_break=self.allocation_enforce_lecturer_break,
                weights=self.allocation_weights,
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid allocation settings: {exc.errors()[0]['msg']}") from exc


@lru_cache
def get_settings() -> Settings:
    return Settings()
