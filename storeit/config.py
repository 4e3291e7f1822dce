"""
Configuration and settings for the StoreIt backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    environment: str = Field(default="development", env="ENVIRONMENT")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    # Appwrite project
    appwrite_endpoint: str = Field(
        default="https://cloud.appwrite.io/v1", env="APPWRITE_ENDPOINT"
    )
    appwrite_project_id: Optional[str] = Field(default=None, env="APPWRITE_PROJECT_ID")
    appwrite_api_key: Optional[str] = Field(default=None, env="APPWRITE_API_KEY")
    appwrite_database_id: str = Field(default="storeit", env="APPWRITE_DATABASE_ID")
    appwrite_users_collection_id: str = Field(
        default="users", env="APPWRITE_USERS_COLLECTION_ID"
    )
    appwrite_files_collection_id: str = Field(
        default="files", env="APPWRITE_FILES_COLLECTION_ID"
    )
    appwrite_bucket_id: str = Field(default="files", env="APPWRITE_BUCKET_ID")

    # Routing / UI contract
    sign_in_path: str = Field(default="/sign-in", env="SIGN_IN_PATH")
    avatar_placeholder_url: str = Field(
        default=(
            "https://img.freepik.com/free-psd/"
            "3d-illustration-person-with-sunglasses_23-2149436188.jpg"
        ),
        env="AVATAR_PLACEHOLDER_URL",
    )

    # Uploads
    max_file_size: int = Field(default=50 * 1024 * 1024, env="MAX_FILE_SIZE")
    total_storage_bytes: int = Field(
        default=2 * 1024 * 1024 * 1024, env="TOTAL_STORAGE_BYTES"
    )

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, env="USE_IN_MEMORY_BACKENDS"
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
