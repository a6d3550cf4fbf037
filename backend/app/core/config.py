"""Configuration management using pydantic-settings."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The Gemini API key may be empty here so the app can still start and
    report itself as degraded; the gateway refuses to build without it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gemini settings (api key required unless running with the mock gateway)
    gemini_api_key: str = ""
    text_model: str = "gemini-flash-lite-latest"
    image_model: str = "gemini-2.5-flash-image"
    mock_generation: bool = False

    # Directory served at "/" (disabled when empty)
    static_dir: str = ""

    # Application settings
    app_name: str = "character-forge-relay"

    # Server settings
    backend_host: str = "localhost"
    backend_port: int = 3000
    frontend_port: int = 5173


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
