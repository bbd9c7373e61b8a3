"""Unit tests for notification models."""

import pytest
from pydantic import TypeAdapter, ValidationError

from infrastructure.notifications.models import (
    AlertPayload,
    Destination,
    DestinationID,
    MessageType,
    NotificationPayload,
    PAYLOAD_TYPES,
    SendResult,
    SendState,
    TestPayload,
)
from infrastructure.operations import OperationResult


@pytest.mark.unit
class TestDestinationID:
    def test_contact_method(self):
        dest_id = DestinationID.contact_method("cm-1")

        assert dest_id.is_user_contact_method
        assert str(dest_id) == "cm:cm-1"

    def test_channel(self):
        dest_id = DestinationID.channel("nc-1")

        assert not dest_id.is_user_contact_method
        assert str(dest_id) == "nc:nc-1"

    def test_requires_exactly_one_id(self):
        with pytest.raises(ValidationError):
            DestinationID()
        with pytest.raises(ValidationError):
            DestinationID(cm_id="cm-1", channel_id="nc-1")

    def test_empty_id_counts_as_unset(self):
        dest_id = DestinationID(cm_id="", channel_id="nc-1")

        assert dest_id.cm_id is None
        assert not dest_id.is_user_contact_method
        assert str(dest_id) == "nc:nc-1"

        with pytest.raises(ValidationError):
            DestinationID(cm_id="", channel_id="")

    def test_is_hashable_value(self):
        assert DestinationID.contact_method("a") == DestinationID(cm_id="a")
        assert len({DestinationID.contact_method("a"), DestinationID(cm_id="a")}) == 1


@pytest.mark.unit
class TestDestination:
    def test_is_immutable(self):
        dest = Destination(type="builtin-webhook", args={"webhook_url": "https://x"})

        with pytest.raises(ValidationError):
            dest.type = "builtin-twilio-voice"

    def test_arg_defaults_to_empty(self):
        dest = Destination(type="builtin-twilio-sms", args={"phone_number": "+1555"})

        assert dest.arg("phone_number") == "+1555"
        assert dest.arg("webhook_url") == ""

    def test_str(self):
        dest = Destination(type="builtin-twilio-sms", args={"phone_number": "+1555"})

        assert str(dest) == "builtin-twilio-sms(phone_number=+1555)"


@pytest.mark.unit
class TestNotificationPayloadUnion:
    def test_every_message_type_has_a_payload(self):
        assert set(PAYLOAD_TYPES) == set(MessageType)

    def test_discriminates_on_message_type(self):
        adapter = TypeAdapter(NotificationPayload)

        payload = adapter.validate_python(
            {
                "message_type": "test_notification",
                "id": "msg-1",
                "dest": {"type": "builtin-webhook", "args": {}},
            }
        )

        assert isinstance(payload, TestPayload)

    def test_json_dump_contains_message_type(self, alert_payload_factory):
        body = alert_payload_factory().model_dump(mode="json")

        assert body["message_type"] == "alert_notification"
        assert body["alert_id"] == 42
        assert isinstance(alert_payload_factory(), AlertPayload)


@pytest.mark.unit
class TestSendResult:
    def test_ok_states(self):
        assert SendState.SENT.is_ok
        assert SendState.DELIVERED.is_ok
        assert not SendState.FAILED_TEMP.is_ok
        assert not SendState.FAILED_PERM.is_ok

    def test_sent_drops_empty_external_id(self):
        assert SendResult.sent("msg-1", external_id="").external_id is None

    def test_from_success_operation_result(self):
        result = SendResult.from_operation_result(
            "msg-1", OperationResult.success(data={"external_id": "SM1"})
        )

        assert result.state == SendState.SENT
        assert result.external_id == "SM1"

    def test_from_transient_operation_result(self):
        result = SendResult.from_operation_result(
            "msg-1", OperationResult.transient_error("server error (HTTP 503)")
        )

        assert result.state == SendState.FAILED_TEMP
        assert result.details == "server error (HTTP 503)"

    def test_from_permanent_operation_result(self):
        result = SendResult.from_operation_result(
            "msg-1", OperationResult.permanent_error("destination gone")
        )

        assert result.state == SendState.FAILED_PERM
