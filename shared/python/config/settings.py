"""
Configuration Management Module

Environment-based configuration with validation using Pydantic Settings.

All components (datastore, photo storage, place search, embed loader) read
their connection details from here instead of hardcoding them. Every field
has a development default so the library imports cleanly in tests.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Values come from the process environment first, then the `.env` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra environment variables
    )

    # =============================================================================
    # PLATFORM IDENTITY
    # =============================================================================
    PLATFORM_NAME: str = Field(default="WhereToChill", description="Platform name for UI and logs")

    # =============================================================================
    # ENVIRONMENT
    # =============================================================================
    ENVIRONMENT: str = Field(default="development", description="Environment name")
    DEBUG: bool = Field(default=False, description="Debug mode (echoes SQL)")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Logging format: json or console")

    # =============================================================================
    # DATASTORE (PostgreSQL + PostGIS)
    # =============================================================================
    POSTGRES_HOST: str = Field(default="localhost", description="PostgreSQL host")
    POSTGRES_PORT: int = Field(default=5432, description="PostgreSQL port")
    POSTGRES_DB: str = Field(default="wheretochill", description="PostgreSQL database")
    POSTGRES_USER: str = Field(default="chill", description="PostgreSQL user")
    POSTGRES_PASSWORD: str = Field(default="chill", description="PostgreSQL password")
    POSTGRES_POOL_SIZE: int = Field(default=10, description="Connection pool size")
    POSTGRES_MAX_OVERFLOW: int = Field(default=10, description="Max pool overflow")
    POSTGRES_POOL_TIMEOUT: int = Field(default=30, description="Pool timeout (seconds)")
    POSTGRES_POOL_RECYCLE: int = Field(default=3600, description="Connection recycle time")

    LOCATIONS_TABLE: str = Field(default="locations", description="Table holding submitted spots")

    # =============================================================================
    # MINIO (Photo Storage)
    # =============================================================================
    MINIO_ENDPOINT: str = Field(default="localhost:9000", description="MinIO endpoint (host:port)")
    MINIO_ACCESS_KEY: str = Field(default="minioadmin", description="MinIO access key")
    MINIO_SECRET_KEY: str = Field(default="minioadmin", description="MinIO secret key")
    MINIO_SECURE: bool = Field(default=False, description="Use HTTPS for MinIO")
    PHOTOS_BUCKET: str = Field(default="photos", description="Bucket for submission photos")
    MINIO_PUBLIC_URL: str = Field(
        default="http://localhost:9000", description="Public URL for photo access"
    )
    PHOTO_UPLOAD_PREFIX: str = Field(
        default="submissions", description="Object key prefix for uploaded photos"
    )

    # =============================================================================
    # PLACE SEARCH (Google Places)
    # =============================================================================
    GOOGLE_MAPS_API_KEY: Optional[str] = Field(
        default=None, description="Places API key; search is disabled when unset"
    )
    GOOGLE_PLACES_BASE_URL: str = Field(
        default="https://maps.googleapis.com/maps/api/place",
        description="Places web service base URL",
    )
    PLACES_COUNTRY: str = Field(default="hk", description="Country restriction for autocomplete")

    # =============================================================================
    # SOCIAL EMBEDS
    # =============================================================================
    INSTAGRAM_EMBED_SCRIPT: str = Field(
        default="https://www.instagram.com/embed.js", description="Instagram embed SDK"
    )
    THREADS_EMBED_SCRIPT: str = Field(
        default="https://www.threads.net/embed.js", description="Threads embed SDK"
    )

    @field_validator("GOOGLE_MAPS_API_KEY", mode="before")
    @classmethod
    def parse_maps_api_key(cls, v):
        """Treat empty strings and placeholder values as "not configured"."""
        if isinstance(v, str) and (not v.strip() or "YOUR_" in v or "CHANGE_" in v):
            return None
        return v

    @property
    def DATABASE_URL(self) -> str:
        """Construct PostgreSQL connection URL from components."""
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        """Connection URL for the asyncpg driver."""
        return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")

    def has_place_search(self) -> bool:
        """Check if the place-search collaborator can be used."""
        return self.GOOGLE_MAPS_API_KEY is not None

    def get_embed_scripts(self) -> dict[str, str]:
        """
        Embed SDK URL per supported platform.

        Returns:
            Dict of platform name -> script URL
        """
        return {
            "instagram": self.INSTAGRAM_EMBED_SCRIPT,
            "threads": self.THREADS_EMBED_SCRIPT,
        }


# Global settings instance (singleton)
settings = Settings()
