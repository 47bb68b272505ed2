"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Finance Manager"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/finance_manager"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Wallets
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "IDR")

    # Balance reconciliation
    BALANCE_SYNC_ENABLED: bool = (
        os.getenv("BALANCE_SYNC_ENABLED", "true").lower() == "true"
    )
    BALANCE_SYNC_INTERVAL_SECONDS: int = int(
        os.getenv("BALANCE_SYNC_INTERVAL_SECONDS", "86400")
    )
    BALANCE_SYNC_TIMEOUT_SECONDS: int = int(
        os.getenv("BALANCE_SYNC_TIMEOUT_SECONDS", "600")
    )
    BALANCE_SYNC_BATCH_SIZE: int = int(
        os.getenv("BALANCE_SYNC_BATCH_SIZE", "1000")
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls. This avoids reading
    environment variables repeatedly.
    """
    return Settings()
