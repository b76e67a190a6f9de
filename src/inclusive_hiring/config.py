"""Configuration management for the Inclusive Hiring core."""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="IHC_",
        case_sensitive=False,
        extra="ignore"
    )

    # Gateway Configuration
    gateway_timeout_seconds: float = Field(5.0, description="Default bound on every gateway call")
    gateway_latency_seconds: float = Field(0.0, description="Simulated I/O latency for the in-memory gateway")
    seed_demo_data: bool = Field(False, description="Load the demo catalog on API startup")

    # Application Configuration
    debug: bool = Field(False, description="Enable debug mode")
    log_level: str = Field("INFO", description="Logging level")
    cache_loggers: bool = Field(True, description="Cache structlog loggers on first use")

    # Server Configuration
    api_host: str = Field("0.0.0.0", description="API server host")
    api_port: int = Field(8000, description="API server port")
    reload: bool = Field(False, description="Enable auto-reload")
    allowed_origins: list[str] = Field(["*"], description="CORS allowed origins")
    allowed_hosts: Optional[list[str]] = Field(None, description="Trusted hosts")


# Global settings instance
settings = Settings()
