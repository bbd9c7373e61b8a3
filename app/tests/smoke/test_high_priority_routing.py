"""End-to-end dispatch through the real notification manager and Twilio providers.

Only the Twilio REST client is mocked; stores and the delivery tracker are
in-memory fakes.
"""

from unittest.mock import MagicMock

import pytest

from infrastructure.notifications.manager import NotificationManager
from infrastructure.notifications.models import (
    AlertState,
    DeliveryRecord,
    Destination,
    DestinationID,
    MessageType,
    SendState,
)
from infrastructure.notifications.providers import TwilioSMSSender, TwilioVoiceSender
from infrastructure.operations import OperationResult
from modules.dispatch import (
    Alert,
    AlertLogEntry,
    AlertLogStore,
    AlertLogType,
    AlertStore,
    ContactMethod,
    ContactMethodStore,
    DeliveryTracker,
    Message,
    OnCallStore,
    ScheduleStore,
    SignalParamStore,
    VerificationStore,
    create_engine,
)

pytestmark = pytest.mark.smoke

SMS_DEST = Destination(type="builtin-twilio-sms", args={"phone_number": "+15555550111"})
VOICE_DEST = Destination(type="builtin-twilio-voice", args={"phone_number": "+15555550222"})


class FakeAlerts(AlertStore):
    def __init__(self, meta):
        self.meta = meta

    def find_one(self, alert_id):
        return Alert(id=alert_id, service_id="svc-1", summary="Database unreachable")

    def service_info(self, service_id):
        return "Payments", 1

    def metadata(self, alert_id):
        return dict(self.meta)


class FakeAlertLogs(AlertLogStore):
    def __init__(self):
        self.sent = []

    def find_one(self, log_id):
        return AlertLogEntry(id=log_id, alert_id=1, kind=AlertLogType.ACKNOWLEDGED)

    def log_notification_sent(self, alert_id, message_id):
        self.sent.append((alert_id, message_id))

    def log_service_notification_sent(self, service_id, message_id):
        self.sent.append((service_id, message_id))


class FakeContacts(ContactMethodStore):
    def find_all(self, user_id):
        return [
            ContactMethod(id="cm-sms", user_id=user_id, dest=SMS_DEST),
            ContactMethod(id="cm-voice", user_id=user_id, dest=VOICE_DEST),
        ]


class InMemoryTracker(DeliveryTracker):
    def __init__(self):
        self.records = {}

    def original_status(self, alert_id, dest_id):
        return self.records.get((alert_id, dest_id))

    def record(self, dest_id, alert_id, message_id, external_id=None):
        key = (alert_id, dest_id)
        if key in self.records:
            return OperationResult.success(data={"recorded": False})
        self.records[key] = DeliveryRecord(
            message_id=message_id,
            alert_id=alert_id,
            dest_id=dest_id,
            external_id=external_id,
        )
        return OperationResult.success(data={"recorded": True})


@pytest.fixture
def twilio_client():
    client = MagicMock()
    client.calls.create.return_value = MagicMock(sid="CA100")
    client.messages.create.return_value = MagicMock(sid="SM100")
    return client


@pytest.fixture
def setup(twilio_client):
    """Build an engine for alert metadata ``meta``."""

    def _setup(meta):
        factory = MagicMock(return_value=twilio_client)
        manager = NotificationManager(
            providers=[
                TwilioVoiceSender(client_factory=factory),
                TwilioSMSSender(client_factory=factory),
            ]
        )
        tracker = InMemoryTracker()
        logs = FakeAlertLogs()
        engine = create_engine(
            alerts=FakeAlerts(meta),
            alert_logs=logs,
            contacts=FakeContacts(),
            schedules=MagicMock(spec=ScheduleStore),
            on_call=MagicMock(spec=OnCallStore),
            verifications=MagicMock(spec=VerificationStore),
            signals=MagicMock(spec=SignalParamStore),
            tracker=tracker,
            manager=manager,
        )
        return engine, tracker, logs

    return _setup


def _alert_message(dest, cm_id, msg_id="msg-1"):
    return Message(
        id=msg_id,
        type=MessageType.ALERT,
        dest_id=DestinationID.contact_method(cm_id),
        dest=dest,
        user_id="user-1",
        service_id="svc-1",
        alert_id=1,
        alert_status=AlertState.UNACKNOWLEDGED,
    )


def test_high_priority_alert_rings_voice(setup, twilio_client, dispatch_config):
    engine, tracker, logs = setup({"alerts/priority": "high"})

    result = engine.send_message(_alert_message(SMS_DEST, "cm-sms"), dispatch_config)

    assert result.state == SendState.SENT
    assert result.external_id == "CA100"
    assert twilio_client.calls.create.call_args.kwargs["to"] == "+15555550222"
    twilio_client.messages.create.assert_not_called()
    assert (1, DestinationID.contact_method("cm-voice")) in tracker.records
    assert logs.sent == [(1, "msg-1")]


def test_status_update_follows_promoted_voice_delivery(setup, twilio_client, dispatch_config):
    engine, tracker, _ = setup({"alerts/priority": "high"})
    engine.send_message(_alert_message(SMS_DEST, "cm-sms"), dispatch_config)

    status = Message(
        id="msg-2",
        type=MessageType.ALERT_STATUS,
        dest_id=DestinationID.contact_method("cm-voice"),
        dest=VOICE_DEST,
        user_id="user-1",
        service_id="svc-1",
        alert_id=1,
        alert_log_id=5,
    )
    result = engine.send_message(status, dispatch_config)

    assert result.state == SendState.SENT
    assert twilio_client.calls.create.call_count == 2


def test_default_priority_alert_never_rings_voice(setup, twilio_client, dispatch_config):
    engine, tracker, logs = setup({})

    result = engine.send_message(_alert_message(VOICE_DEST, "cm-voice"), dispatch_config)

    assert result.state == SendState.FAILED_PERM
    assert result.details == "voice notification suppressed for non-priority alert"
    twilio_client.calls.create.assert_not_called()
    twilio_client.messages.create.assert_not_called()
    assert tracker.records == {}
    assert logs.sent == []


def test_default_priority_alert_still_texts(setup, twilio_client, dispatch_config):
    engine, _, _ = setup({})

    result = engine.send_message(_alert_message(SMS_DEST, "cm-sms"), dispatch_config)

    assert result.state == SendState.SENT
    assert twilio_client.messages.create.call_args.kwargs["to"] == "+15555550111"
