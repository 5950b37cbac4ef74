"""
Application configuration using Pydantic Settings.
All environment variables are loaded here with sensible defaults.

Provider credentials are all optional at this level: a missing value must
never stop the process from booting. The credential resolver decides, per
provider, whether the configuration is complete.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    environment: str = "dev"
    log_level: str = "INFO"

    # Amazon S3
    aws_region: Optional[str] = None
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_s3_bucket: Optional[str] = None

    # Azure Blob Storage
    azure_storage_account_name: Optional[str] = None
    azure_storage_account_key: Optional[str] = None
    azure_storage_container_name: Optional[str] = None

    # Google Cloud Storage
    # GOOGLE_APPLICATION_CREDENTIALS is a path to a service-account JSON file
    google_cloud_project: Optional[str] = None
    google_application_credentials: Optional[str] = None
    gcp_storage_bucket: Optional[str] = None

    # CORS (browser frontend)
    cors_allowed_origins: List[str] = [
        "http://localhost:3000",
        "https://localhost:3000",
        "http://localhost:3001",
        "https://localhost:3001",
        "http://127.0.0.1:3000",
        "https://127.0.0.1:3000",
        "http://127.0.0.1:3001",
        "https://127.0.0.1:3001",
    ]
    cors_max_age: int = 86400  # 24 hours

    # Upload pre-issuance checks
    max_upload_size_bytes: int = 10 * 1024 * 1024  # 10MB
    allowed_upload_types: List[str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/svg+xml",
    ]
    enforce_image_types: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
