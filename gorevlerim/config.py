from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 9000
    log_level: str = "INFO"
    supabase_url: str = ""
    supabase_service_key: str = ""
    todo_user_id: str = ""
    todo_api_key: str = "changeme"
    consent_page_url: str = "https://aliilkertopcu.github.io/gorevlerim/"
    cors_origins: list[str] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
