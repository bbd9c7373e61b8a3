"""
Unit tests for singleton providers.

Tests cover:
- get_settings() caching behavior
- get_dispatch_config() snapshots
- get_notification_manager() provider registration
"""

import pytest

from infrastructure.configuration import DispatchConfig, Settings
from infrastructure.notifications.manager import NotificationManager
from infrastructure.services.providers import (
    get_dispatch_config,
    get_notification_manager,
    get_settings,
)


@pytest.mark.unit
class TestGetSettings:
    """Tests for get_settings() provider function."""

    def test_get_settings_returns_settings_instance(self):
        """get_settings() returns a Settings instance."""
        assert isinstance(get_settings(), Settings)

    def test_get_settings_returns_cached_instance(self):
        """get_settings() returns the same instance (caching)."""
        assert get_settings() is get_settings()

    def test_get_settings_cache_can_be_cleared(self):
        """get_settings() cache can be cleared for testing."""
        instance1 = get_settings()
        get_settings.cache_clear()
        instance2 = get_settings()
        assert instance1 is not instance2


@pytest.mark.unit
class TestGetDispatchConfig:
    """Tests for get_dispatch_config()."""

    def test_reflects_environment(self, monkeypatch):
        """The snapshot is built from current settings."""
        monkeypatch.setenv("HIGH_PRIORITY_LABEL_KEY", "alerts/priority")
        monkeypatch.setenv("HIGH_PRIORITY_LABEL_VALUE", "high")
        get_settings.cache_clear()

        config = get_dispatch_config()

        assert isinstance(config, DispatchConfig)
        assert config.high_priority_label_key == "alerts/priority"
        assert config.high_priority_label_value == "high"

    def test_returns_new_snapshot_each_call(self):
        """Snapshots are not cached."""
        assert get_dispatch_config() is not get_dispatch_config()


@pytest.mark.unit
class TestGetNotificationManager:
    """Tests for get_notification_manager()."""

    def test_registers_builtin_providers(self):
        """Every built-in destination type has a sender."""
        manager = get_notification_manager()

        assert isinstance(manager, NotificationManager)
        assert set(manager.senders) == {
            "builtin-twilio-voice",
            "builtin-twilio-sms",
            "builtin-webpush",
            "builtin-webhook",
        }

    def test_returns_cached_instance(self):
        """The manager is built once per process."""
        assert get_notification_manager() is get_notification_manager()
