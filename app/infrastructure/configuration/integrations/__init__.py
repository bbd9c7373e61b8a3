"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.aws import AwsSettings
from infrastructure.configuration.integrations.gupshup import GupshupSettings
from infrastructure.configuration.integrations.twilio import TwilioSettings
from infrastructure.configuration.integrations.webhook import WebhookSettings
from infrastructure.configuration.integrations.webpush import WebPushSettings

__all__ = [
    "AwsSettings",
    "GupshupSettings",
    "TwilioSettings",
    "WebhookSettings",
    "WebPushSettings",
]
