"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from infrastructure.configuration import DispatchConfig, Settings

if TYPE_CHECKING:
    from infrastructure.notifications.manager import NotificationManager


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

    Infrastructure packages should use this directly to ensure singleton consistency:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


def get_dispatch_config() -> DispatchConfig:
    """
    Build a fresh immutable configuration snapshot for one dispatch.

    Not cached: each call reflects the current settings object, and the
    snapshot it returns never changes while a send is in flight.
    """
    return DispatchConfig.from_settings(get_settings())


@lru_cache
def get_notification_manager() -> "NotificationManager":
    """
    Get application-scoped notification manager singleton.

    Registers every built-in provider once; destination type routing is
    fixed for the lifetime of the process.

    Returns:
        NotificationManager: Manager wired to Twilio, Web Push and webhook providers.
    """
    # Imported here so that logging setup can load settings without the providers
    from infrastructure.notifications.manager import NotificationManager
    from infrastructure.notifications.providers import (
        TwilioSMSSender,
        TwilioVoiceSender,
        WebhookSender,
        WebPushSender,
    )
    from infrastructure.notifications.subscriptions import DynamoDBSubscriptionStore

    settings = get_settings()
    return NotificationManager(
        providers=[
            TwilioVoiceSender(),
            TwilioSMSSender(),
            WebPushSender(
                DynamoDBSubscriptionStore(settings.persistence.PUSH_SUBSCRIPTIONS_TABLE)
            ),
            WebhookSender(),
        ]
    )
