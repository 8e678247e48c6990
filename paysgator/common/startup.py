"""Startup-time helpers for safe config logging."""

from paysgator.common.config import PaysgatorSettings
from paysgator.common.logging import logger


def _safe_value(name: str, settings: PaysgatorSettings) -> str:
    """Return a setting as text with simple redaction for secret-like names."""

    value = getattr(settings, name, None)
    if value is None or value == "":
        return "<unset>"
    if any(secret in name.upper() for secret in ["KEY", "SECRET", "PASSWORD", "TOKEN"]):
        return "<redacted>"
    return str(value)


def log_startup_config(settings: PaysgatorSettings, keys: list[str]) -> dict[str, str]:
    """Log selected settings for quick troubleshooting."""

    config = {"service": settings.service_name}
    for key in keys:
        config[key] = _safe_value(key, settings)
    logger.info("startup_config=%s", config)
    return config
