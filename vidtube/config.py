"""Configuration management for VidTube."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="VT_", extra="ignore")

    # Token signing and sealing
    access_token_secret: str
    refresh_token_secret: str
    token_enc_key: str
    access_token_expiry_minutes: int = 15
    refresh_token_expiry_days: int = 10

    # Database
    database_url: str = "sqlite+aiosqlite:///./dev.db"

    # Media host (Cloudinary compatible)
    media_cloud_name: str = Field(default="")
    media_api_key: str = Field(default="")
    media_api_secret: str = Field(default="")
    media_api_base: str = Field(default="https://api.cloudinary.com/v1_1")

    # Uploads
    upload_tmp_dir: str = Field(default="./public/temp")
    max_upload_mb: int = 200

    # Pagination
    page_size_default: int = 10
    page_size_max: int = 100

    # CORS
    cors_origin: str = "http://localhost:5173"

    # Environment
    env: str = Field(default="dev", pattern="^(dev|prod)$")
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$")


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()  # type: ignore[call-arg]
    return _settings
