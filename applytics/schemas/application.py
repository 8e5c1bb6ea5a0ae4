"""Schemas for application records and their history."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from applytics.utils.dates import coerce_datetime


class ApplicationCreate(BaseModel):
    """Fields accepted when creating an application."""

    company: str = Field(..., description="Company name")
    title: str = Field(..., description="Job title")
    status: str | None = Field(default=None, description="Initial status (default Applied)")
    date_applied: datetime | None = Field(
        default=None, description="Pipeline start date (default now)"
    )
    process_steps: list[str] | None = Field(
        default=None, description="Ordered names of the hiring steps"
    )
    outcome: str | None = Field(default=None, description="Terminal outcome")
    notes: str | None = Field(default=None, description="Free text notes")

    @field_validator("date_applied", mode="before")
    @classmethod
    def _normalise_date(cls, value: Any) -> datetime | None:
        return coerce_datetime(value)


class ApplicationUpdate(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    company: str | None = None
    title: str | None = None
    status: str | None = None
    date_applied: datetime | None = None
    process_steps: list[str] | None = None
    current_step_index: int | None = Field(default=None, ge=0)
    outcome: str | None = None
    notes: str | None = None

    @field_validator("date_applied", mode="before")
    @classmethod
    def _normalise_date(cls, value: Any) -> datetime | None:
        return coerce_datetime(value)

    def supplied_fields(self) -> dict[str, Any]:
        """Return only the fields the caller actually set."""
        return self.model_dump(exclude_unset=True)


class ApplicationRead(BaseModel):
    """A stored application."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    company: str
    title: str
    status: str
    date_applied: datetime
    process_steps: list[str]
    current_step_index: int
    outcome: str | None
    notes: str
    last_updated: datetime


class ApplicationCreated(BaseModel):
    """Response for a successful create."""

    id: int


class HistoryEventRead(BaseModel):
    """A single status snapshot."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    status: str
    date: datetime


class GlobalHistoryItem(HistoryEventRead):
    """Activity feed entry: a history event with its application's identity."""

    company: str
    title: str
