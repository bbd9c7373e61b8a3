"""Infrastructure settings __init__ - exports all infrastructure settings."""

from infrastructure.configuration.infrastructure.dispatch import DispatchSettings
from infrastructure.configuration.infrastructure.persistence import (
    PersistenceSettings,
)

__all__ = [
    "DispatchSettings",
    "PersistenceSettings",
]
