"""Errors raised by the notification provider layer."""

from typing import Optional


class NotificationError(Exception):
    """Base class for provider layer errors."""


class ProviderConfigurationError(NotificationError):
    """A provider is missing required configuration (credentials, VAPID keys).

    Fatal to the current send attempt and surfaced to the caller; never
    converted into a send result.
    """

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class UnsupportedMessageError(NotificationError):
    """A provider cannot render the given payload variant."""

    def __init__(self, provider: str, message_type: str):
        super().__init__(f"{provider}: unsupported message type {message_type}")
        self.provider = provider
        self.message_type = message_type


class UnknownDestinationTypeError(NotificationError):
    """No provider is registered for a destination type."""

    def __init__(self, dest_type: str):
        super().__init__(f"no provider registered for destination type {dest_type}")
        self.dest_type = dest_type


class FieldValidationError(NotificationError, ValueError):
    """A destination argument failed validation.

    Attributes:
        field_id: Destination argument name (e.g. "phone_number")
        reason: Human-friendly explanation
    """

    def __init__(self, field_id: str, reason: str, value: Optional[str] = None):
        super().__init__(f"invalid {field_id}: {reason}")
        self.field_id = field_id
        self.reason = reason
        self.value = value
