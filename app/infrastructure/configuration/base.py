"""Shared base classes for settings modules."""

from pydantic_settings import BaseSettings, SettingsConfigDict

_SETTINGS_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
)


class IntegrationSettings(BaseSettings):
    """Base class for external provider settings (Twilio, Gupshup, Web Push, AWS)."""

    model_config = _SETTINGS_CONFIG


class FeatureSettings(BaseSettings):
    """Base class for dispatch feature settings (alert routing, branding)."""

    model_config = _SETTINGS_CONFIG


class InfrastructureSettings(BaseSettings):
    """Base class for infrastructure-level settings.

    Infrastructure settings control persistence tables and runtime limits
    such as provider request timeouts.
    """

    model_config = _SETTINGS_CONFIG
