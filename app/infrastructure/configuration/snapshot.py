"""Immutable configuration snapshot passed through the dispatch pipeline.

Settings are loaded once from the environment; each dispatch receives a
frozen ``DispatchConfig`` so that a single send attempt sees one consistent
view of priority labels, provider enablement and credentials.

Usage:
    from infrastructure.configuration.snapshot import DispatchConfig
    from infrastructure.services import get_settings

    config = DispatchConfig.from_settings(get_settings())
    result = engine.send_message(message, config)
"""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from infrastructure.configuration.integrations.gupshup import DEFAULT_GUPSHUP_BASE_URL

if TYPE_CHECKING:
    from infrastructure.configuration.settings import Settings


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)


class TwilioConfig(_Snapshot):
    enable: bool = False
    account_sid: str = ""
    auth_token: str = ""
    from_number: str = ""
    disable_sms_contact_method: bool = False
    disable_voice_contact_method: bool = False


class GupshupConfig(_Snapshot):
    enable: bool = False
    base_url: str = DEFAULT_GUPSHUP_BASE_URL
    api_key: str = ""
    source: str = ""


class WebPushConfig(_Snapshot):
    enable: bool = False
    vapid_public_key: str = ""
    vapid_private_key: str = ""
    subscriber_email: str = ""
    ttl: int = 60


class DispatchConfig(_Snapshot):
    """Frozen view of every setting the dispatch pipeline reads.

    Attributes:
        application_name: Name used as prefix in rendered messages
        public_url: Base URL for callback links (may be empty)
        high_priority_label_key: Alert metadata key for the priority policy
        high_priority_label_value: Value marking an alert as high priority
        request_timeout: Seconds allowed for each provider HTTP call
        webhook_enable: Whether webhook channels are enabled
        twilio: Twilio voice/SMS snapshot
        gupshup: Gupshup SMS snapshot
        webpush: Web Push snapshot
    """

    application_name: str = "GoAlert"
    public_url: str = ""
    high_priority_label_key: str = ""
    high_priority_label_value: str = ""
    request_timeout: float = 10.0
    webhook_enable: bool = True
    twilio: TwilioConfig = TwilioConfig()
    gupshup: GupshupConfig = GupshupConfig()
    webpush: WebPushConfig = WebPushConfig()

    def callback_url(self, path: str) -> str:
        """Return an absolute link for ``path`` under the public URL.

        With no public URL configured the path is returned unchanged, which
        still renders usefully in message text.
        """
        if not path.startswith("/"):
            path = "/" + path
        return self.public_url.rstrip("/") + path

    @classmethod
    def from_settings(cls, settings: "Settings") -> "DispatchConfig":
        """Build a snapshot from loaded application settings."""
        return cls(
            application_name=settings.general.APPLICATION_NAME,
            public_url=settings.general.PUBLIC_URL,
            high_priority_label_key=settings.alerts.HIGH_PRIORITY_LABEL_KEY,
            high_priority_label_value=settings.alerts.HIGH_PRIORITY_LABEL_VALUE,
            request_timeout=settings.dispatch.DISPATCH_REQUEST_TIMEOUT_SECONDS,
            webhook_enable=settings.webhook.WEBHOOK_ENABLE,
            twilio=TwilioConfig(
                enable=settings.twilio.TWILIO_ENABLE,
                account_sid=settings.twilio.TWILIO_ACCOUNT_SID,
                auth_token=settings.twilio.TWILIO_AUTH_TOKEN,
                from_number=settings.twilio.TWILIO_FROM_NUMBER,
                disable_sms_contact_method=settings.twilio.TWILIO_DISABLE_SMS_CONTACT_METHOD,
                disable_voice_contact_method=settings.twilio.TWILIO_DISABLE_VOICE_CONTACT_METHOD,
            ),
            gupshup=GupshupConfig(
                enable=settings.gupshup.GUPSHUP_ENABLE,
                base_url=settings.gupshup.GUPSHUP_BASE_URL,
                api_key=settings.gupshup.GUPSHUP_API_KEY,
                source=settings.gupshup.GUPSHUP_SOURCE,
            ),
            webpush=WebPushConfig(
                enable=settings.webpush.WEBPUSH_ENABLE,
                vapid_public_key=settings.webpush.WEBPUSH_VAPID_PUBLIC_KEY,
                vapid_private_key=settings.webpush.WEBPUSH_VAPID_PRIVATE_KEY,
                subscriber_email=settings.webpush.WEBPUSH_SUBSCRIBER_EMAIL,
                ttl=settings.webpush.WEBPUSH_TTL,
            ),
        )
