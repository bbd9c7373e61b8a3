"""Webhook provider: POST the JSON payload to a destination URL."""

import threading
from typing import Dict, Optional
from urllib.parse import urlparse

import requests

from infrastructure.configuration.snapshot import DispatchConfig
from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import FieldValidationError
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
from infrastructure.operations import classify_http_error, classify_http_status

logger = get_module_logger()

WEBHOOK_TYPE = "builtin-webhook"
URL_FIELD = "webhook_url"


class WebhookSender(DestinationProvider, FieldValidator, DisplayRenderer, MessageSender):
    """Delivers any payload variant as JSON to ``webhook_url``."""

    def __init__(self, session: Optional[requests.Session] = None):
        self._session = session or requests.Session()

    @property
    def id(self) -> str:
        return WEBHOOK_TYPE

    def type_info(self, config: DispatchConfig) -> TypeInfo:
        return TypeInfo(
            type=WEBHOOK_TYPE,
            name="Webhook",
            icon_url="builtin://webhook",
            icon_alt_text="Webhook",
            enabled=config.webhook_enable,
            supports_alert_notifications=True,
            supports_status_updates=True,
            supports_on_call_notify=True,
            supports_signals=True,
            required_fields=[
                FieldInfo(
                    field_id=URL_FIELD,
                    label="Webhook URL",
                    hint="Alerts and updates are POSTed as JSON to this URL.",
                    placeholder_text="https://example.com",
                    input_type="url",
                    supports_validation=True,
                )
            ],
        )

    def validate_field(self, field_id: str, value: str) -> None:
        if field_id != URL_FIELD:
            raise FieldValidationError(field_id, "unknown field", value)
        parsed = urlparse(value or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise FieldValidationError(field_id, "must be an http(s) URL", value)

    def display_info(self, args: Dict[str, str]) -> DisplayInfo:
        parsed = urlparse(args.get(URL_FIELD, ""))
        return DisplayInfo(
            text=parsed.netloc or args.get(URL_FIELD, ""),
            icon_url="builtin://webhook",
            icon_alt_text="Webhook",
        )

    def send_message(
        self,
        payload: NotificationPayload,
        config: DispatchConfig,
        cancel: Optional[threading.Event] = None,
    ) -> SendResult:
        url = payload.dest.arg(URL_FIELD)
        body = payload.model_dump(mode="json")
        body["app_name"] = config.application_name

        try:
            response = self._session.post(url, json=body, timeout=config.request_timeout)
        except requests.RequestException as e:
            logger.warning("webhook_transport_error", error=str(e))
            return SendResult.from_operation_result(payload.id, classify_http_error(e))

        if 200 <= response.status_code < 300:
            return SendResult.sent(payload.id)

        logger.warning("webhook_rejected", status_code=response.status_code)
        return SendResult.from_operation_result(
            payload.id,
            classify_http_status(
                response.status_code,
                detail=(response.text or "").strip()[:200],
                retry_after=response.headers.get("Retry-After"),
            ),
        )
