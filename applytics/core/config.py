"""Application configuration management."""

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./tracker.db"
    sql_echo: bool = False

    # Logging
    log_level: str = "INFO"

    # Dashboard
    global_history_limit: int = Field(default=10, ge=1, le=100)
    keyword_limit: int = Field(default=10, ge=1, le=50)

    # HTTP
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
