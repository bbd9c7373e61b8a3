"""Browser push (Web Push / VAPID) settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class WebPushSettings(IntegrationSettings):
    """Web Push configuration.

    Environment Variables:
        WEBPUSH_ENABLE: Enable browser push contact methods
        WEBPUSH_VAPID_PUBLIC_KEY: VAPID application server public key
        WEBPUSH_VAPID_PRIVATE_KEY: VAPID private key used to sign requests
        WEBPUSH_SUBSCRIBER_EMAIL: Contact address sent in the VAPID ``sub`` claim
        WEBPUSH_TTL: Seconds the push service should retain undelivered messages
    """

    WEBPUSH_ENABLE: bool = Field(default=False, alias="WEBPUSH_ENABLE")
    WEBPUSH_VAPID_PUBLIC_KEY: str = Field(default="", alias="WEBPUSH_VAPID_PUBLIC_KEY")
    WEBPUSH_VAPID_PRIVATE_KEY: str = Field(
        default="", alias="WEBPUSH_VAPID_PRIVATE_KEY"
    )
    WEBPUSH_SUBSCRIBER_EMAIL: str = Field(default="", alias="WEBPUSH_SUBSCRIBER_EMAIL")
    WEBPUSH_TTL: int = Field(default=60, alias="WEBPUSH_TTL")
