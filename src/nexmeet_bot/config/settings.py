"""Configuration management using Pydantic settings."""

import logging
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with validation."""

    # Supabase Configuration
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_key: str = Field(..., description="Supabase API key")
    events_table: str = Field("event_details", description="Table holding event records")

    # Telegram Bot Configuration
    telegram_bot_token: Optional[str] = Field(None, description="Bot token issued by BotFather")

    # Mistral AI Configuration
    mistral_api_key: Optional[str] = Field(None, description="Mistral API key")
    mistral_model_name: str = Field("mistral-small-latest", description="Mistral model name")
    max_response_length: int = Field(4096, description="Maximum length of an AI reply")

    # HTTP API Configuration
    host: str = Field("0.0.0.0")
    port: int = Field(4040)
    environment: str = Field("development")
    cors_origins: str = Field("*", description="Comma separated list of allowed origins")

    # Rate Limiting
    rate_limit_max_requests: int = Field(5)
    rate_limit_window_seconds: int = Field(24 * 60 * 60)

    # Presentation
    event_url_base: str = Field("https://www.nexmeet.social/explore-events/")
    currency_symbol: str = Field("₹")

    # Conversation sessions; None keeps pending prompts until restart
    session_ttl_seconds: Optional[int] = Field(None)

    # Application Configuration
    log_level: str = Field("INFO")
    log_file: Optional[str] = Field("bot.log")
    polling_interval: int = Field(1)  # seconds
    request_timeout: int = Field(30)  # seconds

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"  # Allow extra fields in .env file
    }

    @field_validator("supabase_url", "supabase_key")
    @classmethod
    def validate_required(cls, v):
        """Reject blank database credentials."""
        if not v or not v.strip():
            raise ValueError("Missing required Supabase configuration")
        return v.strip()

    @field_validator("telegram_bot_token")
    @classmethod
    def validate_telegram_token(cls, v):
        """Validate Telegram bot token format."""
        if v is None or v == "":
            return None
        if ":" not in v:
            raise ValueError("Invalid Telegram bot token format")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("session_ttl_seconds")
    @classmethod
    def validate_session_ttl(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Session TTL must be positive")
        return v

    def get_log_level(self) -> int:
        """Get logging level as integer."""
        return getattr(logging, self.log_level)

    def get_cors_origins(self) -> List[str]:
        """Split the configured origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
