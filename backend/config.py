# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Literal
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    DATABASE_URL: str = "sqlite:///./palletflow.db"

    # Session cookie
    SESSION_COOKIE_NAME: str = "palletflow_session"
    SESSION_EXPIRE_MINUTES: int = 24 * 60
    SESSION_COOKIE_SECURE: bool = False
    # "memory" keeps sessions in the process, "database" in the sessions table
    SESSION_BACKEND: Literal["memory", "database"] = "memory"

    FRONTEND_URL: str = "http://localhost:5173"

    # Account created at startup when no user with this username exists
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)

settings = Settings()
