"""Application settings loaded from environment variables and `.env`."""
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the chat backend.

    Credentials and tunables live here; nothing else reads the environment.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Completion API
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-3.5-turbo"
    OPENAI_TIMEOUT: float = 30.0

    # Identity verification
    AUTH_BACKEND: Literal["jwt", "firebase"] = "jwt"
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_USER_CLAIM: str = "sub"
    FIREBASE_PROJECT_ID: Optional[str] = None

    # HTTP
    RATE_LIMIT_PER_MINUTE: int = 2000
    CORS_ORIGINS: list[str] = ["*"]
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    LOG_LEVEL: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
