"""Application configuration using pydantic-settings."""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Provider
    fireworks_api_key: Optional[str] = None
    fireworks_model: str = "accounts/fireworks/models/llama-v3p1-8b-instruct"
    fireworks_base_url: str = "https://api.fireworks.ai/inference/v1"
    chat_temperature: float = 0.5

    # Retry policy
    retry_max_attempts: int = 3
    retry_base_delay_ms: int = 300

    # Server
    port: int = 8080
    host: str = "0.0.0.0"

    # Logging
    log_level: str = "INFO"

    # HTTP Settings
    http_timeout: float = 30.0  # seconds, per attempt

    # Rate Limiting
    rate_limit_per_hour: int = 100

    # CORS
    cors_origins: str = "*"  # Comma-separated origins or "*" for all

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get list of CORS origins."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def chat_completions_url(self) -> str:
        return f"{self.fireworks_base_url.rstrip('/')}/chat/completions"

    @property
    def provider_configured(self) -> bool:
        return bool(self.fireworks_api_key)


# Global settings instance
settings = Settings()
