from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


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
    app_name: str = "Short Link Registry"
    app_version: str = "1.0.0"
    
    # Short links
    base_url: str = "http://127.0.0.1:8000"
    short_code_length: int = 6
    default_validity_minutes: int = 30
    # None keeps retrying until a free code is found
    short_code_max_retries: Optional[int] = None
    
    # Storage settings
    storage_backend: str = "sqlite"  # Options: "sqlite", "memory", "redis"
    database_url: str = "sqlite:///./shortlink.db"
    redis_url: str = "redis://localhost:6379/0"
    urls_storage_key: str = "shortened-urls"
    logs_storage_key: str = "app-logs"
    
    # Logging
    log_level: str = "INFO"
    persist_logs: bool = True
    
    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
