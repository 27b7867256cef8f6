"""
APICompare - API compatibility gate
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application Info
    APP_NAME: str = "APICompare"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"  # Used when DEBUG is off

    # Comparison defaults (callers can override per request / per run)
    COMPARE_BREAKING_API_CHANGES: bool = True
    COMPARE_DESIGNED_API_CHANGES: bool = True

    # CORS - comma-separated list of allowed origins, or "*" for all
    # Example: "https://ci.example.com,https://review.example.com"
    CORS_ORIGINS: str = "*"

    # Allowed hosts for Host header validation (comma-separated, or "*" to disable)
    ALLOWED_HOSTS: str = "*"

    # Maximum request body size in bytes (descriptors for large sims run to tens of MB)
    MAX_REQUEST_SIZE: int = 64 * 1024 * 1024

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL.upper()


settings = Settings()
