"""Test fixtures for notification infrastructure tests."""

from typing import Dict, Optional
from unittest.mock import MagicMock

import pytest

from infrastructure.notifications.models import (
    AlertBundlePayload,
    AlertPayload,
    AlertState,
    AlertStatusPayload,
    DeliveryRecord,
    Destination,
    DestinationID,
    SendResult,
    TestPayload,
    VerificationPayload,
)
from infrastructure.notifications.providers.base import (
    DestinationProvider,
    MessageSender,
    TypeInfo,
)
from infrastructure.notifications.subscriptions import PushSubscription
from infrastructure.operations import OperationResult


@pytest.fixture
def destination_factory():
    """Factory for Destination values.

    Example:
        dest = destination_factory("builtin-webhook", webhook_url="https://example.com")
    """

    def _factory(dest_type: str = "builtin-twilio-sms", **args: str) -> Destination:
        if not args and dest_type.startswith("builtin-twilio"):
            args = {"phone_number": "+15555550123"}
        return Destination(type=dest_type, args=args)

    return _factory


@pytest.fixture
def alert_payload_factory(destination_factory):
    """Factory for AlertPayload instances."""

    def _factory(
        dest: Optional[Destination] = None,
        alert_id: int = 42,
        summary: str = "CPU on fire",
        service_name: str = "Payments",
        user_id: Optional[str] = "user-1",
        meta: Optional[Dict[str, str]] = None,
    ) -> AlertPayload:
        return AlertPayload(
            id="msg-1",
            dest=dest or destination_factory(),
            user_id=user_id,
            alert_id=alert_id,
            summary=summary,
            details="details",
            service_id="svc-1",
            service_name=service_name,
            meta=meta or {},
        )

    return _factory


@pytest.fixture
def payload_variants(destination_factory, alert_payload_factory):
    """One payload of each variant the telephony and push providers render."""

    def _variants(dest: Optional[Destination] = None) -> Dict[str, object]:
        dest = dest or destination_factory()
        original = DeliveryRecord(
            message_id="msg-0",
            alert_id=42,
            dest_id=DestinationID.contact_method("cm-1"),
        )
        return {
            "alert": alert_payload_factory(dest=dest),
            "bundle": AlertBundlePayload(
                id="msg-2",
                dest=dest,
                user_id="user-1",
                service_id="svc-1",
                service_name="Payments",
                count=3,
            ),
            "status": AlertStatusPayload(
                id="msg-3",
                dest=dest,
                user_id="user-1",
                alert_id=42,
                service_id="svc-1",
                log_entry="Acknowledged by Alex",
                summary="CPU on fire",
                new_alert_state=AlertState.ACKNOWLEDGED,
                original_status=original,
            ),
            "test": TestPayload(id="msg-4", dest=dest, user_id="user-1"),
            "verification": VerificationPayload(
                id="msg-5", dest=dest, user_id="user-1", code="004217"
            ),
        }

    return _variants


@pytest.fixture
def push_subscription_factory():
    def _factory(endpoint: str = "https://push.example.com/send/abcdef0123456789xyz"):
        return PushSubscription(endpoint=endpoint, auth="auth-secret", p256dh="p256dh-key")

    return _factory


@pytest.fixture
def mock_subscription_store(push_subscription_factory):
    """SubscriptionStore mock with one subscription and successful deletes."""
    store = MagicMock()
    store.find_by_user.return_value = [push_subscription_factory()]
    store.delete_by_endpoint.return_value = OperationResult.success()
    return store


class FakeSender(DestinationProvider, MessageSender):
    """Minimal provider recording the payloads it was asked to send."""

    def __init__(self, type_id: str, enabled: bool = True, result=None, error=None):
        self._type_id = type_id
        self.enabled = enabled
        self.result = result
        self.error = error
        self.sent = []

    @property
    def id(self) -> str:
        return self._type_id

    def type_info(self, config) -> TypeInfo:
        return TypeInfo(type=self._type_id, name=self._type_id, enabled=self.enabled)

    def send_message(self, payload, config, cancel=None):
        self.sent.append(payload)
        if self.error is not None:
            raise self.error
        return self.result or SendResult.sent(payload.id, external_id="ext-1")


@pytest.fixture
def fake_sender_factory():
    def _factory(type_id: str = "builtin-webhook", **kwargs) -> FakeSender:
        return FakeSender(type_id, **kwargs)

    return _factory
