"""
Configuration management using environment variables.
Handles document store and logging settings with proper validation and defaults.
"""

from typing import Optional
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings


class StoreConfig(BaseSettings):
    """
    Configuration class for the document store backing the book lists.
    Uses pydantic BaseSettings for environment variable management.
    """

    # Backend selection
    store_backend: str = "elasticsearch"

    # Elasticsearch Configuration
    elasticsearch_url: str = "http://localhost:9200"
    users_index: str = "users"
    books_index: str = "books"
    request_timeout: int = 30

    # MongoDB Configuration
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "booklists"

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: Optional[str] = None

    # Development/Testing
    debug: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra fields from .env
    }

    @field_validator("store_backend")
    @classmethod
    def validate_store_backend(cls, v):
        """Ensure the backend is one we can talk to."""
        valid_backends = ["elasticsearch", "mongodb"]
        if v.lower() not in valid_backends:
            raise ValueError(f"store_backend must be one of: {valid_backends}")
        return v.lower()

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v):
        """Ensure timeout is reasonable."""
        if v < 1 or v > 300:
            raise ValueError("request_timeout must be between 1 and 300 seconds")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ["json", "console"]
        if v.lower() not in valid_formats:
            raise ValueError(f"log_format must be one of: {valid_formats}")
        return v.lower()

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None

    def get_headers(self) -> dict:
        """Get default headers for store HTTP requests."""
        return {
            "User-Agent": "BookList-Service/1.0",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }


# Global configuration instance
config = StoreConfig()
