import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `infrastructure.notifications`) works during pytest collection
# regardless of the directory pytest was invoked from.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest  # noqa: E402

from infrastructure.configuration.snapshot import (  # noqa: E402
    DispatchConfig,
    GupshupConfig,
    TwilioConfig,
    WebPushConfig,
)
from infrastructure.services import providers  # noqa: E402


@pytest.fixture(autouse=True)
def clear_provider_caches():
    """Reset cached singletons so settings never leak between tests."""
    providers.get_settings.cache_clear()
    providers.get_notification_manager.cache_clear()
    yield
    providers.get_settings.cache_clear()
    providers.get_notification_manager.cache_clear()


@pytest.fixture
def dispatch_config_factory():
    """Factory for DispatchConfig snapshots.

    Defaults enable every channel with placeholder credentials and the
    ``alerts/priority=high`` priority label.

    Example:
        config = dispatch_config_factory(high_priority_label_key="")
        config = dispatch_config_factory(gupshup=GupshupConfig(enable=True, source="GOALRT"))
    """

    def _factory(**overrides) -> DispatchConfig:
        values = dict(
            application_name="GoAlert",
            public_url="https://goalert.example.com",
            high_priority_label_key="alerts/priority",
            high_priority_label_value="high",
            request_timeout=5.0,
            webhook_enable=True,
            twilio=TwilioConfig(
                enable=True,
                account_sid="AC00000000000000000000000000000000",
                auth_token="twilio-token",
                from_number="+15555550100",
            ),
            gupshup=GupshupConfig(),
            webpush=WebPushConfig(
                enable=True,
                vapid_public_key="vapid-public",
                vapid_private_key="vapid-private",
                subscriber_email="Ops@Example.com",
            ),
        )
        values.update(overrides)
        return DispatchConfig(**values)

    return _factory


@pytest.fixture
def dispatch_config(dispatch_config_factory) -> DispatchConfig:
    return dispatch_config_factory()
