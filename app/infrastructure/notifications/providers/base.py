"""Notification provider capability contracts.

A provider implements any subset of four capabilities:

- ``DestinationProvider``: stable type id and ``TypeInfo`` (name, icon,
  enabled state derived from configuration)
- ``FieldValidator``: syntax/semantics check for one destination argument
- ``DisplayRenderer``: human-readable summary of a destination
- ``MessageSender``: deliver a payload and report a ``SendResult``

The dispatch core only requires ``MessageSender``. ``NotificationManager``
maps destination type ids to providers once, at construction.

Example Implementation:
    class WebhookSender(DestinationProvider, FieldValidator, MessageSender):

        @property
        def id(self) -> str:
            return "builtin-webhook"

        def type_info(self, config):
            return TypeInfo(type=self.id, name="Webhook", enabled=config.webhook_enable)

        def validate_field(self, field_id, value):
            ...

        def send_message(self, payload, config):
            response = requests.post(payload.dest.arg("webhook_url"), json=...)
            ...
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from infrastructure.configuration.snapshot import DispatchConfig
from infrastructure.notifications.models import NotificationPayload, SendResult


class FieldInfo(BaseModel):
    """Description of one required destination argument."""

    field_id: str
    label: str
    hint: str = ""
    placeholder_text: str = ""
    input_type: str = "text"
    supports_validation: bool = False


class TypeInfo(BaseModel):
    """Static description of a destination type plus its enabled state."""

    type: str
    name: str
    icon_url: str = ""
    icon_alt_text: str = ""
    enabled: bool = False
    supports_alert_notifications: bool = False
    supports_status_updates: bool = False
    supports_user_verification: bool = False
    user_verification_required: bool = False
    supports_on_call_notify: bool = False
    supports_signals: bool = False
    required_fields: List[FieldInfo] = Field(default_factory=list)
    user_disclaimer: str = ""


class DisplayInfo(BaseModel):
    """How a configured destination is shown to users."""

    text: str
    icon_url: str = ""
    icon_alt_text: str = ""
    link_url: str = ""


class DestinationProvider(ABC):
    """Identification capability."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Destination type id handled by this provider."""
        pass

    @abstractmethod
    def type_info(self, config: DispatchConfig) -> TypeInfo:
        """Describe the destination type for the given configuration."""
        pass


class FieldValidator(ABC):
    """Field validation capability."""

    @abstractmethod
    def validate_field(self, field_id: str, value: str) -> None:
        """Validate a single destination argument.

        Raises:
            FieldValidationError: if the field is unknown or the value invalid
        """
        pass


class DisplayRenderer(ABC):
    """Display rendering capability."""

    @abstractmethod
    def display_info(self, args: Dict[str, str]) -> DisplayInfo:
        """Render a human-readable summary of destination ``args``."""
        pass


class MessageSender(ABC):
    """Message sending capability."""

    @abstractmethod
    def send_message(
        self,
        payload: NotificationPayload,
        config: DispatchConfig,
        cancel: Optional[threading.Event] = None,
    ) -> SendResult:
        """Deliver a payload to ``payload.dest``.

        ``cancel`` is checked by providers that make more than one outbound
        call; a set event aborts the remaining calls as FAILED_TEMP.

        Transport and provider failures are returned as FAILED_TEMP or
        FAILED_PERM results. Missing configuration raises
        ``ProviderConfigurationError``.
        """
        pass
