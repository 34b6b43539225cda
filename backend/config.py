# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite:///./apd_dashboard.db"

    # Object storage (bucket lives under STORAGE_DIR/STORAGE_BUCKET)
    STORAGE_DIR: str = "storage"
    STORAGE_BUCKET: str = "apd-files"
    SIGNED_URL_EXPIRE_SECONDS: int = 86400

    # Password recovery
    RESET_TOKEN_EXPIRE_MINUTES: int = 60
    FRONTEND_URL: str = "http://localhost:3000"

    SMTP_SERVER: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    FROM_EMAIL: str = "noreply@ptkarya.co.id"

    # Header printed on the monthly balance report
    DEPARTMENT_NAME: str = "GENERAL ENGINEERING"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
