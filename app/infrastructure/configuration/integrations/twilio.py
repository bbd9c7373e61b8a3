"""Twilio telephony integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class TwilioSettings(IntegrationSettings):
    """Twilio voice and SMS configuration.

    Environment Variables:
        TWILIO_ENABLE: Enable Twilio voice and SMS delivery
        TWILIO_ACCOUNT_SID: Twilio account SID
        TWILIO_AUTH_TOKEN: Twilio auth token
        TWILIO_FROM_NUMBER: Caller ID / sender phone number (E.164)
        TWILIO_DISABLE_SMS_CONTACT_METHOD: Hide SMS while keeping voice enabled
        TWILIO_DISABLE_VOICE_CONTACT_METHOD: Hide voice while keeping SMS enabled
    """

    TWILIO_ENABLE: bool = Field(default=False, alias="TWILIO_ENABLE")
    TWILIO_ACCOUNT_SID: str = Field(default="", alias="TWILIO_ACCOUNT_SID")
    TWILIO_AUTH_TOKEN: str = Field(default="", alias="TWILIO_AUTH_TOKEN")
    TWILIO_FROM_NUMBER: str = Field(default="", alias="TWILIO_FROM_NUMBER")
    TWILIO_DISABLE_SMS_CONTACT_METHOD: bool = Field(
        default=False, alias="TWILIO_DISABLE_SMS_CONTACT_METHOD"
    )
    TWILIO_DISABLE_VOICE_CONTACT_METHOD: bool = Field(
        default=False, alias="TWILIO_DISABLE_VOICE_CONTACT_METHOD"
    )
