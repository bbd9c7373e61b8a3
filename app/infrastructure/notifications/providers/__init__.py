"""Notification providers and their capability contracts."""

from infrastructure.notifications.providers.base import (
    DestinationProvider,
    DisplayInfo,
    DisplayRenderer,
    FieldInfo,
    FieldValidator,
    MessageSender,
    TypeInfo,
)
from infrastructure.notifications.providers.twilio import (
    SMS_TYPE,
    VOICE_TYPE,
    TwilioSMSSender,
    TwilioVoiceSender,
)
from infrastructure.notifications.providers.webhook import WEBHOOK_TYPE, WebhookSender
from infrastructure.notifications.providers.webpush import WEBPUSH_TYPE, WebPushSender

__all__ = [
    "DestinationProvider",
    "DisplayInfo",
    "DisplayRenderer",
    "FieldInfo",
    "FieldValidator",
    "MessageSender",
    "TypeInfo",
    "SMS_TYPE",
    "VOICE_TYPE",
    "WEBHOOK_TYPE",
    "WEBPUSH_TYPE",
    "TwilioSMSSender",
    "TwilioVoiceSender",
    "WebhookSender",
    "WebPushSender",
]
