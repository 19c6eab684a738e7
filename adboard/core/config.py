"""
adboard/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (bot token, DB URI, channel, webhook)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Required values are checked by validate_settings() on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Telegram
    BOT_TOKEN: Optional[str] = Field(
        default=None,
        description="Telegram bot token issued by BotFather"
    )
    TELEGRAM_API_URL: str = Field(
        default="https://api.telegram.org",
        description="Telegram Bot API base URL"
    )
    TELEGRAM_TIMEOUT: float = Field(
        default=10.0,
        description="Bot API request timeout in seconds"
    )

    # Webhook
    WEBHOOK_URL: Optional[str] = Field(
        default=None,
        description="Public base URL Telegram delivers updates to"
    )
    WEBHOOK_PATH: str = Field(
        default="/telegram/webhook",
        description="Path of the inbound webhook endpoint"
    )
    WEBHOOK_SECRET: Optional[str] = Field(
        default=None,
        description="Secret token echoed by Telegram in X-Telegram-Bot-Api-Secret-Token"
    )
    SET_WEBHOOK_ON_STARTUP: bool = Field(
        default=True,
        description="Register the webhook with Telegram during startup"
    )

    # Broadcast channel
    CHANNEL_ID: Optional[str] = Field(
        default=None,
        description="Channel id or @username every published ad is announced to"
    )
    CHANNEL_URL: str = Field(
        default="https://t.me/",
        description="Public invite link shown by the 'Ads channel' menu button"
    )
    SUPPORT_CONTACT: str = Field(
        default="@admin",
        description="Contact shown by the 'Help' menu button"
    )

    # MongoDB
    MONGODB_URL: Optional[str] = Field(
        default=None,
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="adboard",
        description="MongoDB database name"
    )

    # Session Management
    SESSION_TIMEOUT_MINUTES: int = Field(
        default=30,
        description="Minutes after which an untouched ad draft is discarded"
    )
    SESSION_TTL_HOURS: int = Field(
        default=24,
        description="Hours after which an idle session document is evicted"
    )

    # Listing
    LISTING_SCAN_LIMIT: int = Field(
        default=1000,
        description="Maximum number of ads scanned per listing request"
    )
    MY_ADS_LIMIT: int = Field(
        default=20,
        description="Maximum number of ads shown by 'My ads'"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("WEBHOOK_PATH")
    @classmethod
    def validate_webhook_path(cls, v):
        """Webhook path must be absolute."""
        if not v.startswith("/"):
            return f"/{v}"
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def webhook_endpoint(self) -> Optional[str]:
        """Full URL registered with Telegram."""
        if not self.WEBHOOK_URL:
            return None
        return self.WEBHOOK_URL.rstrip("/") + self.WEBHOOK_PATH

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ConfigurationError if any required setting is missing.
    """
    from adboard.core.exceptions import ConfigurationError

    errors = []

    if not settings.BOT_TOKEN:
        errors.append("BOT_TOKEN is required")

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.WEBHOOK_URL:
        errors.append("WEBHOOK_URL is required")

    if not settings.CHANNEL_ID:
        errors.append("CHANNEL_ID is required")

    if settings.is_production and not settings.WEBHOOK_SECRET:
        errors.append("WEBHOOK_SECRET is required in production")

    if errors:
        raise ConfigurationError(
            f"Configuration validation failed: {', '.join(errors)}",
            details=errors
        )

    return True
