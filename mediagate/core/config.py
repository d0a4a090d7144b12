"""
mediagate/core/config.py

Centralised configuration loaded from environment variables.
Use a .env file locally; the deployment injects these at runtime.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ── Application ────────────────────────────────────────────────────────────
    app_name: str = "Media Upload Gateway"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"   # "development" | "production"

    # ── Media provider (Cloudinary) ────────────────────────────────────────────
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""

    # ── Uploads ────────────────────────────────────────────────────────────────
    upload_max_size_mb: int = 10            # hard ceiling for a single file
    large_file_threshold_mb: int = 10       # at/above this, use chunked transfer
    upload_chunk_size: int = 6_000_000      # bytes per chunk for large files

    # ── API client ─────────────────────────────────────────────────────────────
    api_base_url: Optional[str] = None      # overrides the environment default
    api_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def default_api_base_url(self) -> str:
        """Base address for the API client when none is passed explicitly."""
        if self.api_base_url:
            return self.api_base_url
        return "http://localhost:5001/api" if self.is_development else "/api"


# Single shared instance - import this everywhere.
settings = Settings()
