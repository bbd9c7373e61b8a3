"""Outgoing webhook settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class WebhookSettings(IntegrationSettings):
    """Webhook channel configuration.

    Environment Variables:
        WEBHOOK_ENABLE: Enable webhook notification channels
    """

    WEBHOOK_ENABLE: bool = Field(default=True, alias="WEBHOOK_ENABLE")
