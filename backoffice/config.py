from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=True)

    # Application
    APP_NAME: str = Field(default="Surplus Back Office")
    APP_VERSION: str = Field(default="0.1.0")
    API_PREFIX: str = Field(default="/api")
    CORS_ORIGINS: List[str] = Field(default=["*"])

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./surplus.db")
    # False keeps the all-or-nothing seeding check, True fills each missing default key
    SEED_MISSING_DEFAULTS: bool = Field(default=False)

    # Server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)
    RELOAD: bool = Field(default=False)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
