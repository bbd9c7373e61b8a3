"""Fixtures for dispatch module tests."""

from datetime import datetime, timezone
from typing import Optional
from unittest.mock import MagicMock

import pytest

from infrastructure.notifications.models import (
    AlertState,
    DeliveryRecord,
    Destination,
    DestinationID,
    MessageType,
    SendResult,
)
from infrastructure.operations import OperationResult
from modules.dispatch.builder import PayloadBuilder
from modules.dispatch.engine import DispatchEngine
from modules.dispatch.models import (
    Alert,
    AlertLogEntry,
    AlertLogType,
    ContactMethod,
    Message,
    Schedule,
    User,
)

SMS = "builtin-twilio-sms"
VOICE = "builtin-twilio-voice"


@pytest.fixture
def sms_dest() -> Destination:
    return Destination(type=SMS, args={"phone_number": "+15555550123"})


@pytest.fixture
def voice_dest() -> Destination:
    return Destination(type=VOICE, args={"phone_number": "+15555550123"})


@pytest.fixture
def message_factory(sms_dest):
    """Factory for pending messages.

    Example:
        msg = message_factory(MessageType.ALERT, alert_status=AlertState.CLOSED)
        msg = message_factory(MessageType.TEST, sent=True)
    """

    def _factory(
        msg_type: MessageType = MessageType.ALERT,
        id: str = "msg-1",
        dest: Optional[Destination] = None,
        cm_id: str = "cm-sms",
        sent: bool = False,
        **overrides,
    ) -> Message:
        values = dict(
            id=id,
            type=msg_type,
            dest_id=DestinationID.contact_method(cm_id),
            dest=dest or sms_dest,
            user_id="user-1",
            service_id="svc-1",
            alert_id=42,
            alert_status=AlertState.UNACKNOWLEDGED,
            alert_log_id=7,
            schedule_id="sched-1",
            verify_id="verify-1",
            sent_at=datetime(2024, 1, 1, tzinfo=timezone.utc) if sent else None,
        )
        values.update(overrides)
        return Message(**values)

    return _factory


@pytest.fixture
def contact_methods(sms_dest, voice_dest):
    return [
        ContactMethod(id="cm-sms", user_id="user-1", dest=sms_dest),
        ContactMethod(id="cm-voice", user_id="user-1", dest=voice_dest),
    ]


@pytest.fixture
def mock_contacts(contact_methods):
    store = MagicMock()
    store.find_all.return_value = contact_methods
    return store


@pytest.fixture
def mock_alerts():
    store = MagicMock()
    store.service_info.return_value = ("Payments", 2)
    store.find_one.return_value = Alert(
        id=42, service_id="svc-1", summary="CPU on fire", details="cpu > 95%"
    )
    store.metadata.return_value = {}
    return store


@pytest.fixture
def mock_alert_logs():
    store = MagicMock()
    store.find_one.return_value = AlertLogEntry(
        id=7, alert_id=42, kind=AlertLogType.ACKNOWLEDGED, message="Acknowledged by Alex"
    )
    return store


@pytest.fixture
def mock_schedules():
    store = MagicMock()
    store.find_one.return_value = Schedule(id="sched-1", name="Primary")
    return store


@pytest.fixture
def mock_on_call():
    store = MagicMock()
    store.on_call_users_by_schedule.return_value = [
        User(id="u1", name="Sam"),
        User(id="u2", name="Kai"),
    ]
    return store


@pytest.fixture
def mock_verifications():
    store = MagicMock()
    store.code.return_value = 4217
    return store


@pytest.fixture
def mock_signals():
    store = MagicMock()
    store.signal_params.return_value = '{"message": "deploy done", "attempt": "2"}'
    return store


@pytest.fixture
def mock_tracker():
    """Tracker with no prior deliveries and successful writes."""
    tracker = MagicMock()
    tracker.original_status.return_value = None
    tracker.record.return_value = OperationResult.success(data={"recorded": True})
    return tracker


@pytest.fixture
def delivery_record_factory():
    def _factory(message_id: str = "msg-0", cm_id: str = "cm-sms") -> DeliveryRecord:
        return DeliveryRecord(
            message_id=message_id,
            alert_id=42,
            dest_id=DestinationID.contact_method(cm_id),
            external_id="SM0",
        )

    return _factory


@pytest.fixture
def builder(
    mock_alerts,
    mock_alert_logs,
    mock_contacts,
    mock_schedules,
    mock_on_call,
    mock_verifications,
    mock_signals,
    mock_tracker,
):
    return PayloadBuilder(
        alerts=mock_alerts,
        alert_logs=mock_alert_logs,
        contacts=mock_contacts,
        schedules=mock_schedules,
        on_call=mock_on_call,
        verifications=mock_verifications,
        signals=mock_signals,
        tracker=mock_tracker,
    )


@pytest.fixture
def mock_manager():
    """NotificationManager mock that reports every payload as sent."""
    manager = MagicMock()
    manager.send.side_effect = lambda payload, config, cancel=None: SendResult.sent(
        payload.id, external_id="ext-1"
    )
    return manager


@pytest.fixture
def engine(builder, mock_manager, mock_alert_logs, mock_tracker):
    return DispatchEngine(
        builder=builder,
        manager=mock_manager,
        alert_logs=mock_alert_logs,
        tracker=mock_tracker,
    )
