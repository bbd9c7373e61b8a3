"""
Service providers.

Provides application-scoped singletons for settings and notification egress.
"""

from infrastructure.services.providers import (
    get_dispatch_config,
    get_notification_manager,
    get_settings,
)

__all__ = [
    "get_dispatch_config",
    "get_notification_manager",
    "get_settings",
]
