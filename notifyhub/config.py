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
        default="sqlite:///./notifyhub.db",
        description="SQLAlchemy URL of the default tenant database",
        min_length=1,
    )
    tenant_database_url_template: str | None = Field(
        default=None,
        description=(
            "SQLAlchemy URL with a '{tenant_id}' placeholder used to reach the "
            "isolated database of each tenant"
        ),
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_name: str = Field(
        default="App", description="Name shown in the footer of notification emails"
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending notification emails",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of notification emails",
        min_length=3,
    )
    twilio_account_sid: str | None = Field(
        default=None, description="Twilio account SID used for SMS delivery"
    )
    twilio_auth_token: str | None = Field(
        default=None, description="Twilio auth token used for SMS delivery"
    )
    twilio_phone_number: str | None = Field(
        default=None, description="Sender number for outgoing SMS messages"
    )
    vapid_public_key: str | None = Field(
        default=None, description="VAPID public key handed to browsers for push"
    )
    vapid_private_key: str | None = Field(
        default=None, description="VAPID private key used to sign push messages"
    )
    vapid_email: str = Field(
        default="mailto:admin@example.com",
        description="Contact URI placed in the VAPID 'sub' claim",
    )
    default_country_code: str = Field(
        default="92",
        description="Dialing code assumed for local phone numbers starting with 0",
        pattern=r"^\d{1,3}$",
    )
    channel_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to every outbound gateway request",
        gt=0,
    )
    dispatch_max_workers: int = Field(
        default=4, description="Worker threads running detached dispatches", gt=0
    )
    push_max_workers: int = Field(
        default=8, description="Worker threads used to fan out push messages", gt=0
    )
    push_icon: str = Field(
        default="/favicon.ico", description="Icon and badge URL used in push payloads"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200"],
        description="Origins allowed to call the API from a browser",
    )

    @model_validator(mode="after")
    def _validate_gateway_pairs(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        if bool(self.twilio_account_sid) ^ bool(self.twilio_auth_token):
            raise ValueError(
                "TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN must both be provided to enable SMS"
            )
        if (
            self.tenant_database_url_template
            and "{tenant_id}" not in self.tenant_database_url_template
        ):
            raise ValueError(
                "TENANT_DATABASE_URL_TEMPLATE must contain a '{tenant_id}' placeholder"
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
