"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./approvals.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="IANA timezone (or UTC+hh:mm offset) used for timestamps and daily stats",
    )
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the client application, used for links in emails",
    )
    log_level: str = Field(default="INFO", description="Root logger level")
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    twilio_account_sid: str | None = Field(default=None, description="Twilio account SID")
    twilio_auth_token: str | None = Field(default=None, description="Twilio auth token")
    twilio_phone_number: str | None = Field(
        default=None, description="Twilio phone number SMS messages are sent from"
    )
    sms_sender_name: str = Field(
        default="CetaProjectsManager",
        description="Product name prefixed to every SMS body",
    )
    firebase_credentials_file: str | None = Field(
        default=None,
        description="Path to the Firebase service account JSON used for push notifications",
    )
    reminder_enabled: bool = Field(
        default=True, description="Start the reminder scheduler with the application"
    )
    reminder_threshold_days: int = Field(
        default=7,
        description="Days a project may stay pending before users are reminded",
        gt=0,
    )
    reminder_cron_schedule: str = Field(
        default="0 9 * * *",
        description="Crontab expression controlling when the reminder pass runs",
        min_length=1,
    )
    notification_workers: int = Field(
        default=8,
        description="Worker threads used for fire-and-forget notification fan-out",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @model_validator(mode="after")
    def _validate_twilio_credentials(self) -> "Settings":
        provided = [
            bool(self.twilio_account_sid),
            bool(self.twilio_auth_token),
            bool(self.twilio_phone_number),
        ]
        if any(provided) and not all(provided):
            raise ValueError(
                "TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_PHONE_NUMBER must be provided together"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
