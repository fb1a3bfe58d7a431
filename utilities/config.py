"""
Configuration management using environment variables.
Handles logging and book service settings with validation and defaults.
"""

from typing import Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings
from pathlib import Path

from bookstore.models import FilterMode


# Levels accepted by the runtime log-level endpoint
LOGGER_LEVELS = ["ERROR", "WARN", "INFO", "DEBUG", "TRACE"]


class ServerConfig(BaseSettings):
    """
    Configuration class for the book server.
    Uses pydantic BaseSettings for environment variable management.
    """

    # Logging Configuration
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    log_format: str = Field(default="console", env="LOG_FORMAT")
    log_file: Optional[str] = Field(default=None, env="LOG_FILE")
    request_logger_level: str = Field(default="INFO", env="REQUEST_LOGGER_LEVEL")
    books_logger_level: str = Field(default="INFO", env="BOOKS_LOGGER_LEVEL")

    # Book service
    filter_mode: FilterMode = Field(default=FilterMode.LEGACY, env="FILTER_MODE")

    # Development/Testing
    debug: bool = Field(default=False, env="DEBUG")

    @validator('log_level')
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @validator('request_logger_level', 'books_logger_level')
    def validate_logger_level(cls, v):
        """Ensure named logger levels use the runtime allow-list."""
        if v.upper() not in LOGGER_LEVELS:
            raise ValueError(f'logger level must be one of: {LOGGER_LEVELS}')
        return v.upper()

    @validator('log_format')
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields from .env

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None


# Global configuration instance
config = ServerConfig()
