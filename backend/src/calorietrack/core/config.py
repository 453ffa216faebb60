from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_ROOT = Path(__file__).resolve().parents[3]
ENV_PATH = BACKEND_ROOT / ".env"
GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/"

# Load environment variables as early as possible so Settings picks them up.
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "CalorieTrack API"
    app_version: str = "0.1.0"
    docs_url: str = "/docs"
    database_url: str = f"sqlite:///{(BACKEND_ROOT / 'calorietrack.db').as_posix()}"
    database_echo: bool = False
    log_level: str = "INFO"

    advisor_llm_enabled: bool = True
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_api_url: str = GEMINI_API_URL
    gemini_timeout_seconds: float = 30.0

    advisor_history_tokens: int = 2000
    advisor_chars_per_token: float = 4.0
    advisor_meal_history_days: int = 7
    advisor_weight_history_months: int = 1
    advisor_artifact_max_age_days: int = 7


@lru_cache
def get_settings() -> Settings:
    return Settings()
