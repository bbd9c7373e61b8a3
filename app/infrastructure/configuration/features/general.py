"""General application settings used in rendered notifications."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class GeneralSettings(FeatureSettings):
    """Application identity.

    Environment Variables:
        APPLICATION_NAME: Name prefixed to SMS/voice/push text (default: GoAlert)
        PUBLIC_URL: Externally reachable base URL for callback links
    """

    APPLICATION_NAME: str = Field(default="GoAlert", alias="APPLICATION_NAME")
    PUBLIC_URL: str = Field(default="", alias="PUBLIC_URL")
