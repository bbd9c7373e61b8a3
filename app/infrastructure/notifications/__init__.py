"""Notification delivery for the dispatch engine.

Provides channel-agnostic payload models and a single egress point that
routes each payload to the provider for its destination type:
- Twilio voice calls and SMS (with Gupshup as the alternate SMS backend)
- Browser push (Web Push with VAPID)
- Webhooks

Usage:
    from infrastructure.notifications import NotificationManager, TestPayload, Destination

    payload = TestPayload(
        id="msg-1",
        dest=Destination(type="builtin-webhook", args={"webhook_url": "https://example.com/hook"}),
    )
    result = manager.send(payload, config)
"""

# Models
from infrastructure.notifications.models import (
    AlertBundlePayload,
    AlertPayload,
    AlertState,
    AlertStatusPayload,
    DeliveryRecord,
    Destination,
    DestinationID,
    MessageType,
    NotificationPayload,
    OnCallUser,
    PAYLOAD_TYPES,
    ScheduleOnCallUsersPayload,
    SendResult,
    SendState,
    SignalPayload,
    TestPayload,
    VerificationPayload,
)

# Errors
from infrastructure.notifications.errors import (
    FieldValidationError,
    NotificationError,
    ProviderConfigurationError,
    UnknownDestinationTypeError,
    UnsupportedMessageError,
)

# Egress
from infrastructure.notifications.manager import NotificationManager

# Push subscriptions
from infrastructure.notifications.subscriptions import (
    DynamoDBSubscriptionStore,
    PushSubscription,
    SubscriptionStore,
)

__all__ = [
    # Models
    "AlertBundlePayload",
    "AlertPayload",
    "AlertState",
    "AlertStatusPayload",
    "DeliveryRecord",
    "Destination",
    "DestinationID",
    "MessageType",
    "NotificationPayload",
    "OnCallUser",
    "PAYLOAD_TYPES",
    "ScheduleOnCallUsersPayload",
    "SendResult",
    "SendState",
    "SignalPayload",
    "TestPayload",
    "VerificationPayload",
    # Errors
    "FieldValidationError",
    "NotificationError",
    "ProviderConfigurationError",
    "UnknownDestinationTypeError",
    "UnsupportedMessageError",
    # Egress
    "NotificationManager",
    # Push subscriptions
    "DynamoDBSubscriptionStore",
    "PushSubscription",
    "SubscriptionStore",
]
