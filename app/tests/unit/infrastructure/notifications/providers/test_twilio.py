"""Unit tests for the Twilio voice and SMS providers."""

from unittest.mock import MagicMock

import pytest
import requests
from twilio.base.exceptions import TwilioRestException

from infrastructure.configuration.snapshot import GupshupConfig, TwilioConfig
from infrastructure.notifications.errors import (
    FieldValidationError,
    ProviderConfigurationError,
)
from infrastructure.notifications.models import SendState
from infrastructure.notifications.providers.twilio import (
    SMS_TYPE,
    VOICE_TYPE,
    TwilioSMSSender,
    TwilioVoiceSender,
)
from integrations.gupshup import GupshupError


@pytest.fixture
def twilio_client():
    client = MagicMock()
    client.messages.create.return_value = MagicMock(sid="SM123")
    client.calls.create.return_value = MagicMock(sid="CA123")
    return client


@pytest.fixture
def client_factory(twilio_client):
    return MagicMock(return_value=twilio_client)


@pytest.mark.unit
class TestPhoneNumberField:
    @pytest.mark.parametrize("number", ["+15555550123", "+919876543210", "+442071838750"])
    def test_accepts_e164(self, number):
        TwilioSMSSender().validate_field("phone_number", number)

    @pytest.mark.parametrize("number", ["", "15555550123", "+05555550123", "+1 555 555", "+1234567890123456"])
    def test_rejects_non_e164(self, number):
        with pytest.raises(FieldValidationError):
            TwilioVoiceSender().validate_field("phone_number", number)

    def test_rejects_unknown_field(self):
        with pytest.raises(FieldValidationError):
            TwilioVoiceSender().validate_field("webhook_url", "+15555550123")

    def test_display_info_shows_number(self):
        info = TwilioSMSSender().display_info({"phone_number": "+15555550123"})

        assert info.text == "+15555550123"
        assert info.icon_url == "builtin://phone-text"


@pytest.mark.unit
class TestTwilioTypeInfo:
    def test_voice_enabled_with_twilio(self, dispatch_config):
        info = TwilioVoiceSender().type_info(dispatch_config)

        assert info.type == VOICE_TYPE
        assert info.enabled is True
        assert [f.field_id for f in info.required_fields] == ["phone_number"]

    def test_voice_disabled_by_flag(self, dispatch_config_factory):
        config = dispatch_config_factory(
            twilio=TwilioConfig(enable=True, disable_voice_contact_method=True)
        )

        assert TwilioVoiceSender().type_info(config).enabled is False

    def test_sms_enabled_by_gupshup_without_twilio(self, dispatch_config_factory):
        config = dispatch_config_factory(
            twilio=TwilioConfig(enable=False), gupshup=GupshupConfig(enable=True)
        )

        info = TwilioSMSSender().type_info(config)

        assert info.type == SMS_TYPE
        assert info.enabled is True
        assert info.supports_on_call_notify is True

    def test_sms_disabled_without_backends(self, dispatch_config_factory):
        config = dispatch_config_factory(twilio=TwilioConfig(enable=False))

        assert TwilioSMSSender().type_info(config).enabled is False


@pytest.mark.unit
class TestTwilioVoiceSender:
    def test_places_call_with_spoken_alert(
        self, client_factory, twilio_client, alert_payload_factory, dispatch_config
    ):
        sender = TwilioVoiceSender(client_factory=client_factory)

        result = sender.send_message(alert_payload_factory(), dispatch_config)

        assert result.state == SendState.SENT
        assert result.external_id == "CA123"
        kwargs = twilio_client.calls.create.call_args.kwargs
        assert kwargs["to"] == "+15555550123"
        assert kwargs["from_"] == "+15555550100"
        assert "CPU on fire" in kwargs["twiml"]
        assert kwargs["twiml"].startswith("<Response>")

    def test_missing_credentials_raise(self, client_factory, alert_payload_factory, dispatch_config_factory):
        config = dispatch_config_factory(twilio=TwilioConfig(enable=True))
        sender = TwilioVoiceSender(client_factory=client_factory)

        with pytest.raises(ProviderConfigurationError):
            sender.send_message(alert_payload_factory(), config)
        client_factory.assert_not_called()

    @pytest.mark.parametrize(
        "status,expected",
        [
            (400, SendState.FAILED_PERM),
            (404, SendState.FAILED_PERM),
            (429, SendState.FAILED_TEMP),
            (503, SendState.FAILED_TEMP),
        ],
    )
    def test_rest_errors_are_classified(
        self, status, expected, client_factory, twilio_client, alert_payload_factory, dispatch_config
    ):
        twilio_client.calls.create.side_effect = TwilioRestException(
            status, "https://api.twilio.com/Calls.json", msg="nope"
        )
        sender = TwilioVoiceSender(client_factory=client_factory)

        result = sender.send_message(alert_payload_factory(), dispatch_config)

        assert result.state == expected
        assert "twilio: nope" in result.details

    def test_timeout_is_temporary(
        self, client_factory, twilio_client, alert_payload_factory, dispatch_config
    ):
        twilio_client.calls.create.side_effect = requests.Timeout("slow")
        sender = TwilioVoiceSender(client_factory=client_factory)

        result = sender.send_message(alert_payload_factory(), dispatch_config)

        assert result.state == SendState.FAILED_TEMP


@pytest.mark.unit
class TestTwilioSMSSender:
    def test_sends_sms_through_twilio(
        self, client_factory, twilio_client, payload_variants, dispatch_config
    ):
        sender = TwilioSMSSender(client_factory=client_factory)

        result = sender.send_message(payload_variants()["verification"], dispatch_config)

        assert result.state == SendState.SENT
        assert result.external_id == "SM123"
        twilio_client.messages.create.assert_called_once_with(
            to="+15555550123",
            from_="+15555550100",
            body="GoAlert: Verification code: 004217",
        )

    def test_gupshup_selected_when_enabled(
        self, client_factory, twilio_client, alert_payload_factory, dispatch_config_factory
    ):
        gupshup = MagicMock()
        gupshup.send_sms.return_value = "gs-1"
        config = dispatch_config_factory(gupshup=GupshupConfig(enable=True, source="GOALRT"))
        sender = TwilioSMSSender(client_factory=client_factory, gupshup_client=gupshup)

        result = sender.send_message(alert_payload_factory(), config)

        assert result.state == SendState.SENT
        assert result.external_id == "gs-1"
        to_number, text = gupshup.send_sms.call_args.args
        assert to_number == "+15555550123"
        assert text.startswith("GoAlert: Alert #42: CPU on fire")
        twilio_client.messages.create.assert_not_called()

    def test_gupshup_empty_message_id_is_sent(self, alert_payload_factory, dispatch_config_factory):
        gupshup = MagicMock()
        gupshup.send_sms.return_value = ""
        config = dispatch_config_factory(gupshup=GupshupConfig(enable=True, source="GOALRT"))

        result = TwilioSMSSender(gupshup_client=gupshup).send_message(
            alert_payload_factory(), config
        )

        assert result.state == SendState.SENT
        assert result.external_id is None

    def test_gupshup_without_source_raises(self, alert_payload_factory, dispatch_config_factory):
        config = dispatch_config_factory(gupshup=GupshupConfig(enable=True))

        with pytest.raises(ProviderConfigurationError):
            TwilioSMSSender(gupshup_client=MagicMock()).send_message(
                alert_payload_factory(), config
            )

    @pytest.mark.parametrize(
        "status,expected",
        [(400, SendState.FAILED_PERM), (502, SendState.FAILED_TEMP)],
    )
    def test_gupshup_http_errors_are_classified(
        self, status, expected, alert_payload_factory, dispatch_config_factory
    ):
        gupshup = MagicMock()
        gupshup.send_sms.side_effect = GupshupError(status, "bad")
        config = dispatch_config_factory(gupshup=GupshupConfig(enable=True, source="GOALRT"))

        result = TwilioSMSSender(gupshup_client=gupshup).send_message(
            alert_payload_factory(), config
        )

        assert result.state == expected

    def test_gupshup_transport_error_is_temporary(
        self, alert_payload_factory, dispatch_config_factory
    ):
        gupshup = MagicMock()
        gupshup.send_sms.side_effect = requests.ConnectionError("reset")
        config = dispatch_config_factory(gupshup=GupshupConfig(enable=True, source="GOALRT"))

        result = TwilioSMSSender(gupshup_client=gupshup).send_message(
            alert_payload_factory(), config
        )

        assert result.state == SendState.FAILED_TEMP
