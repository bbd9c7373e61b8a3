"""Browser push notifications (Web Push with VAPID).

One push message is built per payload variant and delivered to every
subscription the user has registered. Subscriptions the push service
reports as gone (404/410) are deleted. The message counts as sent when at
least one subscription accepted it.
"""

import json
import threading
from typing import Dict, Optional
from urllib.parse import urlparse

import requests
from email_validator import EmailNotValidError, validate_email
from pywebpush import WebPushException, webpush

from infrastructure.configuration.snapshot import DispatchConfig
from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import (
    ProviderConfigurationError,
    UnsupportedMessageError,
)
from infrastructure.notifications.models import (
    AlertBundlePayload,
    AlertPayload,
    AlertStatusPayload,
    NotificationPayload,
    SendResult,
    TestPayload,
    VerificationPayload,
)
from infrastructure.notifications.providers.base import (
    DestinationProvider,
    DisplayInfo,
    DisplayRenderer,
    MessageSender,
    TypeInfo,
)
from infrastructure.notifications.subscriptions import (
    PushSubscription,
    SubscriptionStore,
    endpoint_suffix,
)

logger = get_module_logger()

WEBPUSH_TYPE = "builtin-webpush"
GONE_STATUS_CODES = (404, 410)
LOCAL_HOSTS = ("", "localhost", "127.0.0.1", "::1")


def subscriber_address(email: str, public_url: str) -> str:
    """Contact address for the VAPID ``sub`` claim, as ``mailto:`` URI."""
    email = (email or "").strip()
    if email:
        try:
            validated = validate_email(email, check_deliverability=False)
            return f"mailto:{validated.normalized.lower()}"
        except EmailNotValidError:
            logger.warning("webpush_subscriber_email_invalid")

    host = (urlparse(public_url).hostname or "").lower() if public_url else ""
    if host in LOCAL_HOSTS or host.endswith(".local"):
        host = "localhost"
    return f"mailto:no-reply@{host}"


def build_push_message(payload: NotificationPayload, config: DispatchConfig) -> Dict[str, str]:
    """Channel payload ``{type, title, body, url}`` for one message variant."""
    app = config.application_name

    if isinstance(payload, AlertPayload):
        return {
            "type": "alert",
            "title": f"Alert #{payload.alert_id} · {payload.service_name}",
            "body": payload.summary.strip() or f"Alert #{payload.alert_id} is active.",
            "url": config.callback_url(f"/alerts/{payload.alert_id}"),
        }
    if isinstance(payload, AlertBundlePayload):
        return {
            "type": "alert-bundle",
            "title": f"{payload.service_name} Alerts",
            "body": f"{payload.count} unacknowledged alerts",
            "url": config.callback_url(f"/services/{payload.service_id}/alerts"),
        }
    if isinstance(payload, AlertStatusPayload):
        return {
            "type": "alert-status",
            "title": f"Alert #{payload.alert_id} update",
            "body": payload.log_entry.strip()
            or f"Alert #{payload.alert_id} status updated.",
            "url": config.callback_url(f"/alerts/{payload.alert_id}"),
        }
    if isinstance(payload, TestPayload):
        return {
            "type": "test",
            "title": f"{app} Test Message",
            "body": f"This is a test notification from {app}.",
            "url": config.callback_url("/profile"),
        }
    if isinstance(payload, VerificationPayload):
        return {
            "type": "verification",
            "title": f"{app} Verification Code",
            "body": f"Enter code {payload.code} to verify this device.",
            "url": config.callback_url("/profile"),
        }

    raise UnsupportedMessageError(WEBPUSH_TYPE, type(payload).__name__)


class WebPushSender(DestinationProvider, DisplayRenderer, MessageSender):
    """Push provider delivering to every browser a user has subscribed."""

    def __init__(self, store: SubscriptionStore):
        self.store = store

    @property
    def id(self) -> str:
        return WEBPUSH_TYPE

    def type_info(self, config: DispatchConfig) -> TypeInfo:
        return TypeInfo(
            type=WEBPUSH_TYPE,
            name="Browser Push",
            icon_url="builtin://webpush",
            icon_alt_text="Browser Push",
            enabled=config.webpush.enable,
            supports_alert_notifications=True,
            supports_status_updates=True,
            supports_user_verification=True,
            user_disclaimer="Notifications are delivered to every browser you have enabled.",
        )

    def display_info(self, args: Dict[str, str]) -> DisplayInfo:
        return DisplayInfo(
            text="Browser notifications",
            icon_url="builtin://webpush",
            icon_alt_text="Browser Push",
        )

    def send_message(
        self,
        payload: NotificationPayload,
        config: DispatchConfig,
        cancel: Optional[threading.Event] = None,
    ) -> SendResult:
        push = config.webpush
        if not (push.vapid_public_key and push.vapid_private_key):
            raise ProviderConfigurationError(self.id, "VAPID key pair is not configured")
        if not payload.user_id:
            raise ProviderConfigurationError(self.id, "push destination has no user")

        data = json.dumps(build_push_message(payload, config))
        subscriptions = self.store.find_by_user(payload.user_id)
        if not subscriptions:
            logger.info("webpush_no_subscriptions", user_id=payload.user_id)
            return SendResult.failed_perm(payload.id, "no registered browsers for web push")

        claims = {"sub": subscriber_address(push.subscriber_email, config.public_url)}
        delivered = 0
        for sub in subscriptions:
            if cancel is not None and cancel.is_set():
                if delivered:
                    break
                return SendResult.failed_temp(payload.id, "send cancelled")
            if self._deliver(sub, data, claims, config):
                delivered += 1

        logger.info(
            "webpush_delivery_complete",
            user_id=payload.user_id,
            delivered=delivered,
            subscriptions=len(subscriptions),
        )
        if delivered == 0:
            return SendResult.failed_perm(
                payload.id, "web push delivery failed for all subscriptions"
            )
        return SendResult.sent(payload.id)

    def _deliver(
        self, sub: PushSubscription, data: str, claims: dict, config: DispatchConfig
    ) -> bool:
        try:
            webpush(
                subscription_info=sub.subscription_info(),
                data=data,
                vapid_private_key=config.webpush.vapid_private_key,
                vapid_claims=dict(claims),
                ttl=config.webpush.ttl,
                headers={"Urgency": "high"},
                timeout=config.request_timeout,
            )
            return True
        except WebPushException as e:
            status = e.response.status_code if e.response is not None else None
            logger.warning(
                "webpush_delivery_failed",
                endpoint=endpoint_suffix(sub.endpoint),
                status_code=status,
                error=str(e),
            )
            if status in GONE_STATUS_CODES:
                result = self.store.delete_by_endpoint(sub.endpoint)
                if not result.is_success:
                    logger.error(
                        "webpush_subscription_delete_failed",
                        endpoint=endpoint_suffix(sub.endpoint),
                        error=result.message,
                    )
        except requests.RequestException as e:
            logger.warning(
                "webpush_transport_error",
                endpoint=endpoint_suffix(sub.endpoint),
                error=str(e),
            )
        return False
