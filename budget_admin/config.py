from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_BACKEND_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = f"sqlite:///{_BACKEND_ROOT / 'budgets.db'}"

    # App
    APP_NAME: str = "Participatory Budgets Admin"
    DEBUG: bool = True
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # CORS - override with env var CORS_ORIGINS as a JSON array
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Feature flag: budget administration (``process.budgets``)
    BUDGETS_ENABLED: bool = True

    # Localisation
    DEFAULT_LOCALE: str = "en"
    AVAILABLE_LOCALES: list[str] = ["en", "es"]

    # Ordered phase catalog. "drafting" is retired and no longer listed.
    PHASE_KINDS: list[str] = [
        "informing",
        "accepting",
        "reviewing",
        "selecting",
        "valuating",
        "publishing_prices",
        "balloting",
        "reviewing_ballots",
        "finished",
    ]

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
