"""
Application configuration using Pydantic Settings.

Centralizes all environment variables and app settings.
Provider credentials are optional here; each endpoint that needs one checks
for it and answers 500 "not configured" instead of calling the provider.
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    All sensitive/configurable values should live here.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars not defined here
    )

    # Application
    app_name: str = "DreamDesk API"
    debug: bool = False

    # MongoDB - Motor (async driver) connection string
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "dreamdesk"

    # Clerk identity provider
    clerk_secret_key: Optional[str] = None  # Backend API key (sk_...)
    clerk_webhook_secret: Optional[str] = None  # Svix signing secret (whsec_...)
    clerk_jwt_key: Optional[str] = None  # PEM public key for networkless verification
    clerk_jwks_url: Optional[str] = None  # e.g. https://<frontend-api>/.well-known/jwks.json
    clerk_api_url: str = "https://api.clerk.com/v1"

    # Blob storage - local disk, served back under /blobs
    blob_dir: str = "blobs"
    public_base_url: str = "http://localhost:8000"
    max_upload_size_mb: int = 25

    # AI / content providers
    fal_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    llm_model: str = "llama-3.1-8b-instant"
    youtube_api_key: Optional[str] = None

    @field_validator(
        "clerk_secret_key",
        "clerk_webhook_secret",
        "clerk_jwt_key",
        "clerk_jwks_url",
        "fal_api_key",
        "openai_api_key",
        "groq_api_key",
        "youtube_api_key",
        mode="before",
    )
    @classmethod
    def strip_secret(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not isinstance(v, str):
            return v
        return v.strip() or None


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance.
    Using lru_cache avoids re-reading .env on every request.
    """
    return Settings()
