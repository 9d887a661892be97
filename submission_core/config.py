"""
Unified configuration for submission-disk services.

This module provides a single Settings class that consolidates all
environment variables used by the API, the pipeline workers and the
maintenance scripts.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Unified settings for all submission-disk services.

    Environment variables are loaded from .env file and can be overridden
    by actual environment variables.
    """

    # Service identification
    SERVICE_NAME: str = "submission-disk"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # PostgreSQL
    POSTGRES_DSN: str = "host=localhost port=5432 dbname=submissions user=postgres password=postgres"

    # Message log (Celery over Redis)
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/0"
    CONSUMER_GROUP_ID: str = "submission-pipeline"
    TOPIC_PARTITIONS: int = 3
    HANDLER_TIMEOUT_SECONDS: int = 300

    # Submission storage and limits
    SUBMISSION_STORAGE_PATH: str = "uploads"
    SUBMISSION_MAX_FILE_SIZE: int = 100 * 1024 * 1024  # 100 MiB
    SUBMISSION_MIN_FILE_SIZE: int = 1
    SUBMISSION_MAX_ZIP_ENTRIES: int = 10_000
    SUBMISSION_MAX_COMPRESSION_RATIO: int = 100

    # Virus scanning (clamd)
    VIRUS_SCAN_HOST: str = "localhost"
    VIRUS_SCAN_PORT: int = 3310
    VIRUS_SCAN_ENABLED: bool = True
    VIRUS_SCAN_TIMEOUT: float = 30.0

    # Reconciliation of submissions stuck between commit and publish
    RECONCILE_AFTER_SECONDS: int = 600

    # App host/port
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8080

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore"
    )


# Global settings instance
settings = Settings()  # type: ignore
