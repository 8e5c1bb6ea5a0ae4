"""Pydantic schemas for request/response validation."""

from applytics.schemas.analytics import AnalyticsResponse, StatsResponse
from applytics.schemas.application import (
    ApplicationCreate,
    ApplicationRead,
    ApplicationUpdate,
    HistoryEventRead,
)
from applytics.schemas.importer import ImportCandidate, ImportResult

__all__ = [
    "AnalyticsResponse",
    "ApplicationCreate",
    "ApplicationRead",
    "ApplicationUpdate",
    "HistoryEventRead",
    "ImportCandidate",
    "ImportResult",
    "StatsResponse",
]
