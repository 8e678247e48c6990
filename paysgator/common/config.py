"""Environment-driven adapter settings.

The host loads these once and passes them explicitly into the adapter; there
is no import-time settings global. Variables use the `PAYSGATOR_` prefix
(see `.env.example`).
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaysgatorSettings(BaseSettings):
    """Typed view of the gateway configuration surface."""

    api_key: str = Field(min_length=1)
    webhook_secret: str = ""
    test_mode: bool = False
    # Opt-in only: accept webhooks unauthenticated when no secret is set.
    allow_unsigned_webhooks: bool = False
    return_url: str | None = None
    base_url: str = "https://paysgator.com"
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    service_name: str = "paysgator-adapter"
    log_level: str = "INFO"
    otel_exporter_otlp_endpoint: str | None = None
    model_config = SettingsConfigDict(env_prefix="PAYSGATOR_", env_file=".env", extra="ignore")


def load_settings() -> PaysgatorSettings:
    """Build settings from environment variables and `.env`."""

    return PaysgatorSettings()
