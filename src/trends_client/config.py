"""Configuration settings using Pydantic."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Client settings loaded from environment variables (prefix ``TRENDS_``)."""

    # Google Trends
    hl: str = Field(default="en-US", description="Locale sent as the hl parameter")
    base_url: str = Field(
        default="https://trends.google.com", description="Google Trends host"
    )

    # HTTP
    request_timeout: float = Field(default=30.0, description="Per-request timeout in seconds")
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        description="User-Agent header sent with every request",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")

    @property
    def api_url(self) -> str:
        """Base URL of the trends API endpoints."""
        return f"{self.base_url.rstrip('/')}/trends/api"

    model_config = SettingsConfigDict(
        env_prefix="TRENDS_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


# Global settings instance
settings = Settings()
