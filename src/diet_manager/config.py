"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    data_dir: Path = Path(".")
    users_file: str = "users.txt"
    products_file: str = "products.txt"
    meals_file: str = "meals.txt"
    daily_logs_file: str = "daily_logs.txt"
    daily_log_format: Literal["grouped", "legacy"] = "grouped"
    timezone: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        env_prefix="DIET_MANAGER_",
        extra="ignore",
    )
