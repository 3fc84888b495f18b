# backend/config.py
from pydantic import EmailStr
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    DATABASE_URL: str = "sqlite:///./ejewel.db"
    # Upper bound for a single store call, in seconds
    DB_TIMEOUT_SECONDS: int = 10

    FRONTEND_URL: Optional[str] = None

    # Initial admin account created by the seeder
    ADMIN_EMAIL: EmailStr = "admin@ejewel.com"
    ADMIN_PASSWORD: str = "admin123"
    SEED_ON_STARTUP: bool = True

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
