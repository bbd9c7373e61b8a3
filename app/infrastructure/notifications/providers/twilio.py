"""Telephony providers: Twilio voice calls and SMS.

Voice and SMS share one destination argument (``phone_number``, E.164).
SMS delivery switches to the Gupshup HTTP backend whenever Gupshup is
enabled in configuration; the destination itself never selects a backend.
"""

import re
import threading
from typing import Callable, Dict, Optional

import requests
from twilio.base.exceptions import TwilioRestException

from infrastructure.configuration.snapshot import DispatchConfig
from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import (
    FieldValidationError,
    ProviderConfigurationError,
)
from infrastructure.notifications.models import NotificationPayload, SendResult
from infrastructure.notifications.providers.base import (
    DestinationProvider,
    DisplayInfo,
    DisplayRenderer,
    FieldInfo,
    FieldValidator,
    MessageSender,
    TypeInfo,
)
from infrastructure.notifications.providers.render import render_sms, render_voice
from infrastructure.operations import classify_http_error, classify_http_status
from integrations.gupshup import GupshupClient, GupshupError
from integrations.twilio import (
    build_twiml_say,
    create_call,
    get_twilio_client,
    send_sms,
)

logger = get_module_logger()

VOICE_TYPE = "builtin-twilio-voice"
SMS_TYPE = "builtin-twilio-sms"
PHONE_FIELD = "phone_number"

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")

ClientFactory = Callable[[DispatchConfig], object]


def _default_client_factory(config: DispatchConfig):
    return get_twilio_client(
        config.twilio.account_sid,
        config.twilio.auth_token,
        timeout=config.request_timeout,
    )


def _phone_field() -> FieldInfo:
    return FieldInfo(
        field_id=PHONE_FIELD,
        label="Phone Number",
        hint="Include country code e.g. +1 (USA), +91 (India), +44 (UK)",
        placeholder_text="11235550123",
        input_type="tel",
        supports_validation=True,
    )


def _classify_twilio_error(message_id: str, exc: TwilioRestException) -> SendResult:
    status = exc.status or 0
    if status == 429 or status >= 500:
        return SendResult.failed_temp(message_id, f"twilio: {exc.msg}")
    return SendResult.failed_perm(message_id, f"twilio: {exc.msg}")


class _TwilioBase(DestinationProvider, FieldValidator, DisplayRenderer):
    """Shared phone number handling for voice and SMS."""

    def __init__(self, client_factory: Optional[ClientFactory] = None):
        self._client_factory = client_factory or _default_client_factory

    def validate_field(self, field_id: str, value: str) -> None:
        if field_id != PHONE_FIELD:
            raise FieldValidationError(field_id, "unknown field", value)
        if not E164_PATTERN.match(value or ""):
            raise FieldValidationError(
                field_id, "must be a valid number in E.164 format", value
            )

    def display_info(self, args: Dict[str, str]) -> DisplayInfo:
        return DisplayInfo(
            text=args.get(PHONE_FIELD, ""),
            icon_url=self._icon_url,
            icon_alt_text=self._icon_alt,
        )

    def _client(self, config: DispatchConfig):
        twilio = config.twilio
        if not (twilio.account_sid and twilio.auth_token and twilio.from_number):
            raise ProviderConfigurationError(
                self.id, "Twilio account SID, auth token and from number are required"
            )
        return self._client_factory(config)


class TwilioVoiceSender(_TwilioBase, MessageSender):
    """Voice calls through Twilio."""

    _icon_url = "builtin://phone-voice"
    _icon_alt = "Voice Call"

    @property
    def id(self) -> str:
        return VOICE_TYPE

    def type_info(self, config: DispatchConfig) -> TypeInfo:
        return TypeInfo(
            type=VOICE_TYPE,
            name="Voice Call",
            icon_url=self._icon_url,
            icon_alt_text=self._icon_alt,
            enabled=config.twilio.enable
            and not config.twilio.disable_voice_contact_method,
            supports_alert_notifications=True,
            supports_status_updates=True,
            supports_user_verification=True,
            user_verification_required=True,
            required_fields=[_phone_field()],
            user_disclaimer=(
                "By entering your phone number, you consent to receive voice "
                "calls for alert notifications."
            ),
        )

    def send_message(
        self,
        payload: NotificationPayload,
        config: DispatchConfig,
        cancel: Optional[threading.Event] = None,
    ) -> SendResult:
        text = render_voice(self.id, payload, config)
        client = self._client(config)
        to_number = payload.dest.arg(PHONE_FIELD)
        try:
            sid = create_call(
                client, config.twilio.from_number, to_number, build_twiml_say(text)
            )
        except TwilioRestException as e:
            logger.warning(
                "twilio_voice_failed", status=e.status, code=e.code, error=e.msg
            )
            return _classify_twilio_error(payload.id, e)
        except requests.RequestException as e:
            logger.warning("twilio_voice_transport_error", error=str(e))
            return SendResult.from_operation_result(payload.id, classify_http_error(e))
        return SendResult.sent(payload.id, external_id=sid)


class TwilioSMSSender(_TwilioBase, MessageSender):
    """SMS through Twilio, or through Gupshup when Gupshup is enabled."""

    _icon_url = "builtin://phone-text"
    _icon_alt = "Text Message"

    def __init__(
        self,
        client_factory: Optional[ClientFactory] = None,
        gupshup_client: Optional[GupshupClient] = None,
    ):
        super().__init__(client_factory)
        self._gupshup_client = gupshup_client

    @property
    def id(self) -> str:
        return SMS_TYPE

    def type_info(self, config: DispatchConfig) -> TypeInfo:
        enabled = (
            config.twilio.enable and not config.twilio.disable_sms_contact_method
        ) or config.gupshup.enable
        return TypeInfo(
            type=SMS_TYPE,
            name="Text Message (SMS)",
            icon_url=self._icon_url,
            icon_alt_text=self._icon_alt,
            enabled=enabled,
            supports_alert_notifications=True,
            supports_status_updates=True,
            supports_user_verification=True,
            user_verification_required=True,
            supports_on_call_notify=True,
            required_fields=[_phone_field()],
            user_disclaimer=(
                "By entering your phone number, you consent to receive text "
                "messages for alert notifications. Message and data rates may apply."
            ),
        )

    def send_message(
        self,
        payload: NotificationPayload,
        config: DispatchConfig,
        cancel: Optional[threading.Event] = None,
    ) -> SendResult:
        text = render_sms(self.id, payload, config)
        to_number = payload.dest.arg(PHONE_FIELD)

        if config.gupshup.enable:
            return self._send_gupshup(payload.id, to_number, text, config)

        client = self._client(config)
        try:
            sid = send_sms(client, config.twilio.from_number, to_number, text)
        except TwilioRestException as e:
            logger.warning(
                "twilio_sms_failed", status=e.status, code=e.code, error=e.msg
            )
            return _classify_twilio_error(payload.id, e)
        except requests.RequestException as e:
            logger.warning("twilio_sms_transport_error", error=str(e))
            return SendResult.from_operation_result(payload.id, classify_http_error(e))
        return SendResult.sent(payload.id, external_id=sid)

    def _gupshup(self, config: DispatchConfig) -> GupshupClient:
        if self._gupshup_client is not None:
            return self._gupshup_client
        return GupshupClient(
            base_url=config.gupshup.base_url,
            api_key=config.gupshup.api_key,
            source=config.gupshup.source,
            timeout=config.request_timeout,
        )

    def _send_gupshup(
        self, message_id: str, to_number: str, text: str, config: DispatchConfig
    ) -> SendResult:
        if not config.gupshup.source:
            raise ProviderConfigurationError(self.id, "Gupshup source is required")
        try:
            external_id = self._gupshup(config).send_sms(to_number, text)
        except GupshupError as e:
            logger.warning("gupshup_sms_failed", status_code=e.status_code)
            return SendResult.from_operation_result(
                message_id, classify_http_status(e.status_code, detail=str(e))
            )
        except requests.RequestException as e:
            logger.warning("gupshup_sms_transport_error", error=str(e))
            return SendResult.from_operation_result(message_id, classify_http_error(e))

        if not external_id:
            logger.info("gupshup_sms_sent_without_message_id")
        return SendResult.sent(message_id, external_id=external_id)
