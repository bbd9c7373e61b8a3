"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the dispatch
engine using Pydantic BaseSettings with domain-based organization, plus the
immutable snapshot handed to each dispatch.

Exports:
    Settings: Main settings class (environment-backed)
    DispatchConfig: Frozen per-dispatch configuration snapshot

Example:
    ```python
    from infrastructure.services import get_settings
    from infrastructure.configuration import DispatchConfig

    settings = get_settings()
    config = DispatchConfig.from_settings(settings)
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.snapshot import (
    DispatchConfig,
    GupshupConfig,
    TwilioConfig,
    WebPushConfig,
)

__all__ = [
    "Settings",
    "DispatchConfig",
    "GupshupConfig",
    "TwilioConfig",
    "WebPushConfig",
]
