"""Schemas for the status catalog and preference store."""

from typing import Any

from pydantic import BaseModel, Field


class StatusCatalogResponse(BaseModel):
    """The ordered list of selectable statuses."""

    statuses: list[str]


class StatusLabelRequest(BaseModel):
    """A single status label."""

    label: str = Field(..., min_length=1, description="Status label")


class StatusOrderRequest(BaseModel):
    """Full replacement of the catalog order."""

    statuses: list[str]


class MigrateRequest(BaseModel):
    """Relabel every application at ``old_status``."""

    old_status: str = Field(..., min_length=1)
    new_status: str = Field(..., min_length=1)


class MigrateResponse(BaseModel):
    """Number of applications relabelled."""

    migrated: int


class StatusUsageResponse(BaseModel):
    """How many applications currently use a status."""

    status: str
    count: int


class SettingValueRequest(BaseModel):
    """A JSON preference value."""

    value: Any
