from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = False

    # Application
    app_name: str = "Golink Service"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 3030

    # Storage
    storage_backend: str = "sqlite"  # Options: "sqlite", "memory"
    database_path: str = "./data/golinks.db"
    storage_fallback_to_memory: bool = False  # Serve from memory if SQLite fails to open

    # Auth (API is open when no token is configured)
    api_token: Optional[str] = None

    # HTTP
    cors_origins: List[str] = ["*"]
    default_page_size: int = 10

    # Logging
    log_level: str = "INFO"

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
