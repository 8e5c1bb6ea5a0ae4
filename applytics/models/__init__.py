"""Database models."""

from applytics.models.application import Application, HistoryEvent
from applytics.models.setting import Setting

__all__ = [
    "Application",
    "HistoryEvent",
    "Setting",
]
