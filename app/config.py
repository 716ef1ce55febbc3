from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Literal

class Settings(BaseSettings):
    DATABASE_URL: str
    ALLOWED_ORIGINS: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # Session cookie settings
    SESSION_SECRET_KEY: str = "your-secret-key-change-in-production"
    SESSION_ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "intered_session"
    SESSION_MAX_AGE_SECONDS: int = 7 * 24 * 60 * 60
    SESSION_COOKIE_SECURE: bool = False
    SESSION_BACKEND: Literal["database", "memory"] = "database"

    # bcrypt cost factor, never below 10
    BCRYPT_ROUNDS: int = Field(default=10, ge=10, le=16)

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env

settings = Settings()
