"""Settings aggregator for the dispatch service."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import (
    AwsSettings,
    GupshupSettings,
    TwilioSettings,
    WebhookSettings,
    WebPushSettings,
)

# Feature settings
from infrastructure.configuration.features import (
    AlertsSettings,
    GeneralSettings,
)

# Infrastructure settings
from infrastructure.configuration.infrastructure import (
    DispatchSettings,
    PersistenceSettings,
)


_SECTIONS = {
    "aws": AwsSettings,
    "twilio": TwilioSettings,
    "gupshup": GupshupSettings,
    "webpush": WebPushSettings,
    "webhook": WebhookSettings,
    "alerts": AlertsSettings,
    "general": GeneralSettings,
    "dispatch": DispatchSettings,
    "persistence": PersistenceSettings,
}


class Settings(BaseSettings):
    """Process-wide settings, one section per concern.

    Sections read their own environment variables (``TWILIO_*``,
    ``GUPSHUP_*``, ``WEBPUSH_*``, ...). Send paths never read this object
    directly; they receive a ``DispatchConfig`` snapshot taken with
    ``DispatchConfig.from_settings`` so a config reload cannot change a
    message halfway through a send.

    Top-level variables:
        PREFIX: Deployment prefix; empty in production
        LOG_LEVEL: Root log level
        GIT_SHA: Commit being run, stamped on every log line
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    aws: AwsSettings
    twilio: TwilioSettings
    gupshup: GupshupSettings
    webpush: WebPushSettings
    webhook: WebhookSettings

    alerts: AlertsSettings
    general: GeneralSettings

    dispatch: DispatchSettings
    persistence: PersistenceSettings

    @property
    def is_production(self) -> bool:
        return not self.PREFIX

    def __init__(self, **kwargs):
        # Sections not passed explicitly are loaded from the environment.
        for name, section_cls in _SECTIONS.items():
            if name not in kwargs:
                kwargs[name] = section_cls()
        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )
