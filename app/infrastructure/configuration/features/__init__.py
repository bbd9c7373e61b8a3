"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.alerts import AlertsSettings
from infrastructure.configuration.features.general import GeneralSettings

__all__ = [
    "AlertsSettings",
    "GeneralSettings",
]
