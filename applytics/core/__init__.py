"""Core application components."""

from applytics.core.config import settings
from applytics.core.exceptions import (
    NotFoundError,
    StorageError,
    TrackerError,
    ValidationError,
)
from applytics.core.storage import Base, SettingsStorage, async_session, init_models

__all__ = [
    "Base",
    "NotFoundError",
    "SettingsStorage",
    "StorageError",
    "TrackerError",
    "ValidationError",
    "async_session",
    "init_models",
    "settings",
]
