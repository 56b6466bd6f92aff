"""
Configuration settings for the LLM Resilience Layer.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "LLM Resilience Layer"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # "production" switches logs to JSON

    # === Retry (delays in milliseconds) ===
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_INITIAL_DELAY_MS: int = 1000
    RETRY_MAX_DELAY_MS: Optional[int] = 30000  # None = no ceiling
    RETRY_BACKOFF_FACTOR: float = 2.0
    RETRY_JITTER: bool = True  # +/-25% to avoid synchronized retry storms

    # === Circuit Breaker ===
    CIRCUIT_BREAKER_ENABLED: bool = True
    CIRCUIT_BREAKER_FAILURE_THRESHOLD: int = 5
    CIRCUIT_BREAKER_RESET_TIMEOUT_MS: int = 30000

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
