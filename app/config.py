from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    telegram_bot_token: str = ""
    db_path: str = "alfred.json"
    llm_model: str = "google/gemini-2.0-flash-exp"
    llm_temperature: float = 0.1
    timezone: str = "America/Sao_Paulo"
    default_category: str = "Geral"
    recent_tasks_limit: int = 5
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
