"""Gupshup alternate SMS backend settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings

DEFAULT_GUPSHUP_BASE_URL = "https://api.gupshup.io/sm/api/v1/msg"


class GupshupSettings(IntegrationSettings):
    """Gupshup SMS API configuration.

    When enabled, SMS notifications are sent through Gupshup instead of
    Twilio.

    Environment Variables:
        GUPSHUP_ENABLE: Route SMS through Gupshup
        GUPSHUP_BASE_URL: API endpoint (default: Gupshup v1 msg endpoint)
        GUPSHUP_API_KEY: Value for the ``apikey`` request header
        GUPSHUP_SOURCE: Registered sender identifier
    """

    GUPSHUP_ENABLE: bool = Field(default=False, alias="GUPSHUP_ENABLE")
    GUPSHUP_BASE_URL: str = Field(
        default=DEFAULT_GUPSHUP_BASE_URL, alias="GUPSHUP_BASE_URL"
    )
    GUPSHUP_API_KEY: str = Field(default="", alias="GUPSHUP_API_KEY")
    GUPSHUP_SOURCE: str = Field(default="", alias="GUPSHUP_SOURCE")
