"""
Core configuration for the HOT22 Dashboard service.
Manages environment variables for the backend API, uploads, paging and history.
"""
import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # HOT22 Backend Configuration
    api_base_url: str = os.getenv("API_BASE_URL", "http://localhost:3001")
    api_timeout_seconds: float = float(os.getenv("API_TIMEOUT_SECONDS", "30"))
    upload_timeout_seconds: float = float(os.getenv("UPLOAD_TIMEOUT_SECONDS", "300"))

    # AWS Configuration
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    upload_history_table_name: str = os.getenv("UPLOAD_HISTORY_TABLE_NAME", "")

    # API Configuration
    api_title: str = os.getenv("API_TITLE", "HOT22 Dashboard API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")

    # File Upload Limits
    max_upload_size_mb: int = int(os.getenv("MAX_UPLOAD_SIZE_MB", "100"))
    accepted_upload_extension: str = os.getenv("ACCEPTED_UPLOAD_EXTENSION", ".txt")
    max_history_size: int = int(os.getenv("MAX_HISTORY_SIZE", "10"))

    # Pagination Configuration
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "50"))
    max_page_numbers: int = int(os.getenv("MAX_PAGE_NUMBERS", "5"))

    # Request Cache
    request_cache_max_entries: int = int(os.getenv("REQUEST_CACHE_MAX_ENTRIES", "50"))
    request_cache_ttl_seconds: float = float(os.getenv("REQUEST_CACHE_TTL_SECONDS", "60"))

    # Notifications
    max_notifications: int = int(os.getenv("MAX_NOTIFICATIONS", "20"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Environment
    environment: str = os.getenv("ENVIRONMENT", "dev")

    @property
    def max_upload_size_bytes(self) -> int:
        """Upload size limit in bytes."""
        return self.max_upload_size_mb * 1024 * 1024

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
