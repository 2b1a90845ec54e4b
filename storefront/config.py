from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve absolute path to the .env file so it loads from any working directory
env_path = Path(__file__).parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "e_store"

    # Full SQLAlchemy URL, takes precedence over the DB_* parts
    DATABASE_URL: Optional[str] = None

    SESSION_SECRET: str
    BCRYPT_ROUNDS: int = 10

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_RETENTION_DAYS: int = 7

    FIRST_ADMIN_EMAIL: Optional[str] = None
    FIRST_ADMIN_PASSWORD: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    return Settings()
