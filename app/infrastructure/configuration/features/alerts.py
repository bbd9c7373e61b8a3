"""Alert notification feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class AlertsSettings(FeatureSettings):
    """High-priority routing for alert notifications.

    An alert whose metadata maps ``HIGH_PRIORITY_LABEL_KEY`` to
    ``HIGH_PRIORITY_LABEL_VALUE`` is promoted to voice; voice delivery is
    suppressed for every other alert. Leaving either value empty disables
    the policy.

    Environment Variables:
        HIGH_PRIORITY_LABEL_KEY: Alert metadata key (e.g. ``alerts/priority``)
        HIGH_PRIORITY_LABEL_VALUE: Value marking an alert as high priority

    Example:
        ```python
        settings = get_settings()
        key = settings.alerts.HIGH_PRIORITY_LABEL_KEY
        ```
    """

    HIGH_PRIORITY_LABEL_KEY: str = Field(default="", alias="HIGH_PRIORITY_LABEL_KEY")
    HIGH_PRIORITY_LABEL_VALUE: str = Field(
        default="", alias="HIGH_PRIORITY_LABEL_VALUE"
    )
