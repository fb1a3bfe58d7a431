"""
API configuration settings.
"""

from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Book Records API"
    api_version: str = "1.0.0"
    api_description: str = "In-memory book records with filtered queries and runtime log levels"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8574
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_prefix = "API_"
        env_file = ".env"
        extra = "ignore"


config = APIConfig()
