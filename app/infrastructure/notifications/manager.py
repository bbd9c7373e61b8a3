"""Notification manager: the single egress point for outgoing messages.

Routes each payload to the provider registered for its destination type.
The type → provider mapping is built once, at construction.

Usage Example:
    from infrastructure.notifications import NotificationManager
    from infrastructure.notifications.providers import WebhookSender

    manager = NotificationManager(providers=[WebhookSender()])
    result = manager.send(payload, config)
    if not result.is_ok:
        logger.warning("send_failed", details=result.details)
"""

import threading
from typing import Dict, List, Optional

import requests

from infrastructure.configuration.snapshot import DispatchConfig
from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import (
    ProviderConfigurationError,
    UnknownDestinationTypeError,
    UnsupportedMessageError,
)
from infrastructure.notifications.models import NotificationPayload, SendResult
from infrastructure.notifications.providers.base import (
    DestinationProvider,
    FieldValidator,
    MessageSender,
    TypeInfo,
)

logger = get_module_logger()


class NotificationManager:
    """Dispatches payloads to providers by destination type.

    Attributes:
        providers: Mapping of destination type id to provider
        senders: Subset of ``providers`` able to send messages

    Example:
        manager = NotificationManager(
            providers=[TwilioVoiceSender(), TwilioSMSSender(), WebhookSender()],
        )
        result = manager.send(payload, config, cancel=stop_event)
    """

    def __init__(self, providers: List[DestinationProvider]):
        self.providers: Dict[str, DestinationProvider] = {}
        self.senders: Dict[str, MessageSender] = {}

        for provider in providers:
            if provider.id in self.providers:
                raise ValueError(f"duplicate provider for destination type {provider.id}")
            self.providers[provider.id] = provider
            if isinstance(provider, MessageSender):
                self.senders[provider.id] = provider

        logger.info(
            "initialized_notification_manager",
            destination_types=sorted(self.providers.keys()),
            senders=sorted(self.senders.keys()),
        )

    def type_info(self, config: DispatchConfig) -> List[TypeInfo]:
        """Describe every registered destination type."""
        return [p.type_info(config) for _, p in sorted(self.providers.items())]

    def validate_field(self, dest_type: str, field_id: str, value: str) -> None:
        """Validate one destination argument with the owning provider.

        Raises:
            UnknownDestinationTypeError: no provider validates this type
            FieldValidationError: the value is invalid
        """
        provider = self.providers.get(dest_type)
        if not isinstance(provider, FieldValidator):
            raise UnknownDestinationTypeError(dest_type)
        provider.validate_field(field_id, value)

    def send(
        self,
        payload: NotificationPayload,
        config: DispatchConfig,
        cancel: Optional[threading.Event] = None,
    ) -> SendResult:
        """Send a payload through the provider for ``payload.dest.type``.

        Process:
        1. Resolve the sender for the destination type
        2. Refuse disabled destination types (permanent failure)
        3. Abort early when ``cancel`` is set (temporary failure)
        4. Call the provider; unexpected exceptions become temporary failures

        Raises:
            UnknownDestinationTypeError: no sender registered for the type
            ProviderConfigurationError: the provider is missing configuration
        """
        dest_type = payload.dest.type
        sender = self.senders.get(dest_type)
        if sender is None:
            raise UnknownDestinationTypeError(dest_type)

        provider = self.providers[dest_type]
        if not provider.type_info(config).enabled:
            logger.warning("destination_type_disabled", dest_type=dest_type)
            return SendResult.failed_perm(payload.id, "destination type is disabled")

        if cancel is not None and cancel.is_set():
            logger.info("send_cancelled", dest_type=dest_type)
            return SendResult.failed_temp(payload.id, "send cancelled")

        try:
            result = sender.send_message(payload, config, cancel=cancel)
        except ProviderConfigurationError:
            raise
        except UnsupportedMessageError as e:
            logger.warning(
                "unsupported_message_type",
                dest_type=dest_type,
                message_type=e.message_type,
            )
            return SendResult.failed_perm(payload.id, str(e))
        except requests.RequestException as e:
            logger.warning("provider_transport_error", dest_type=dest_type, error=str(e))
            return SendResult.failed_temp(payload.id, f"transport error: {e}")
        except Exception as e:  # Catch-all for any other provider failure
            logger.error(
                "provider_send_failed",
                dest_type=dest_type,
                error=str(e),
                exc_info=True,
            )
            return SendResult.failed_temp(payload.id, f"provider error: {e}")

        logger.info(
            "notification_dispatched",
            dest_type=dest_type,
            state=result.state.value,
            external_id=result.external_id,
        )
        return result
