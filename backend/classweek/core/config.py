from functools import lru_cache
import json
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    # Resolve to backend/.env so `uvicorn --app-dir backend` works from any cwd.
    model_config = SettingsConfigDict(env_file=str(BACKEND_ENV_FILE), env_file_encoding="utf-8")

    project_name: str = "ClassWeek API"
    api_prefix: str = "/api"

    database_url: str = "sqlite+pysqlite:///./classweek.db"

    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    grid_start_hour: int = 7
    grid_end_hour: int = 23
    grid_slot_minutes: int = 30
    grid_days: list[int] = [1, 2, 3, 4, 5, 6]
    day_labels_locale: str = "es"

    max_request_size_bytes: int = 2_500_000
    security_enable_hsts: bool = False
    security_hsts_max_age_seconds: int = 31536000

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [str(item).strip() for item in parsed if str(item).strip()]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("grid_days", mode="before")
    @classmethod
    def split_grid_days(cls, value: str | list[int]) -> list[int]:
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                return json.loads(stripped)
            return [int(item) for item in stripped.split(",") if item.strip()]
        return value

    @model_validator(mode="after")
    def validate_grid(self) -> "Settings":
        if not 0 <= self.grid_start_hour < self.grid_end_hour <= 24:
            raise ValueError("grid_start_hour must be before grid_end_hour, both within 0..24")
        if self.grid_slot_minutes < 1 or 60 % self.grid_slot_minutes != 0:
            raise ValueError("grid_slot_minutes must divide an hour")
        invalid = [day for day in self.grid_days if day < 1 or day > 7]
        if invalid or not self.grid_days:
            raise ValueError("grid_days must be a non-empty list of weekdays between 1 and 7")
        self.grid_days = sorted(set(self.grid_days))
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
