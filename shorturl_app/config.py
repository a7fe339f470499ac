from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import List, Optional


PROJECT_ROOT = Path(__file__).resolve().parent.parent


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
    debug: bool = True

    # Application
    app_name: str = "URL Shortener Microservice"
    app_version: str = "1.0.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Storage backend
    store_backend: str = "sql"  # Options: "sql", "mongo"
    database_url: str = "sqlite:///./shorturl.db"
    mongo_uri: Optional[str] = None
    mongo_database: str = "shorturl"
    mongo_timeout_ms: int = 5000

    # Short URL sequence
    counter_namespace: str = "urls"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Landing page
    views_dir: str = str(PROJECT_ROOT / "views")
    public_dir: str = str(PROJECT_ROOT / "public")
    cors_origins: List[str] = ["*"]

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
