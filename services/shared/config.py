"""Shared configuration management for the invoice service.

Based on Pydantic Settings v2 best practices:
https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with the prefix 'APP_'.
    Example: APP_RENDERER_BASE_URL=http://gotenberg:3000
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Service configuration
    service_name: str = Field(
        default="invoice-pdf-service",
        description="Service identifier for metrics and logs",
    )
    service_version: str = Field(
        default="0.1.0",
        description="Service version",
    )

    # PDF renderer configuration (external headless browser)
    renderer_provider: Literal["gotenberg", "browserless"] = Field(
        default="gotenberg",
        description="Rendering engine: gotenberg (Chromium route) or browserless (/pdf API)",
    )
    renderer_base_url: str = Field(
        default="http://localhost:3000",
        description="Rendering engine base URL",
    )
    renderer_api_token: str = Field(
        default="",
        description="Rendering engine token (use env var APP_RENDERER_API_TOKEN)",
    )
    renderer_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for a single render call",
    )
    renderer_max_attempts: int = Field(
        default=2,
        ge=1,
        le=5,
        description="Attempts per render on transport errors (connect/read failures)",
    )

    # Document configuration
    document_locale: str = Field(
        default="en_GB",
        description="Locale used for money and quantity formatting",
    )

    # HTTP
    cors_allow_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser",
    )


def get_settings() -> Settings:
    """Factory function to get settings instance.

    Returns:
        Configured Settings instance
    """
    return Settings()
