"""
Configuration module implementing the Singleton pattern for application settings.

This module provides a centralized configuration management system using Pydantic Settings.
Settings are loaded from environment variables and/or .env files, with type validation.
The Settings class is implemented as a Singleton to ensure consistent configuration
across the application.
"""

import os
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings using Pydantic BaseSettings.

    Configuration values can be overridden by environment variables or values
    in a .env file.

    Attributes:
        REPOSITORY_PATH: Path of the git repository under review
        DB_PATH: Path to the SQLite review store (defaults inside the repository)
        HOST: Interface the API server binds to
        PORT: Port the API server listens on
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_DIR: Directory for rotating log files
        ENVIRONMENT: Environment configuration (development, staging, production)
        DEFAULT_COMMIT_LIMIT: Number of commits returned by the commit listing
    """

    # Core application settings
    REPOSITORY_PATH: str = "."
    DB_PATH: Optional[str] = None

    # Server
    HOST: str = "localhost"
    PORT: int = 3847

    # Environment configuration
    ENVIRONMENT: str = "development"  # Options: development, staging, production

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    DEFAULT_COMMIT_LIMIT: int = 20

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    @property
    def database_path(self) -> str:
        """Resolved location of the review database."""
        if self.DB_PATH:
            return self.DB_PATH
        return os.path.join(self.REPOSITORY_PATH, ".code-review", "reviews.db")


@lru_cache()
def get_settings() -> Settings:
    """
    Create and return a cached instance of the Settings class.

    Returns:
        Settings: The singleton instance of application settings
    """
    return Settings()
