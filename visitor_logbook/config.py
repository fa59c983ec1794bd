import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Backend
    API_BASE_URL: str = "http://localhost:8000"
    API_PREFIX: str = "/api"
    REQUEST_TIMEOUT: float = 30

    # CSRF handshake (Sanctum style double-submit cookie)
    CSRF_COOKIE_PATH: str = "/sanctum/csrf-cookie"
    CSRF_COOKIE_NAME: str = "XSRF-TOKEN"

    # Application
    APP_TITLE: str = "Visitor Logbook"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


@lru_cache()
def get_settings():
    return Settings()


settings = get_settings()


def configure_logging(level: str = settings.LOG_LEVEL):
    """Configure root logging once per process"""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
