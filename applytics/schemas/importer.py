"""Schemas for bulk import."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from applytics.utils.dates import coerce_datetime


class ImportCandidate(BaseModel):
    """One externally sourced row.

    company and title are optional here so a bad row can be dropped by the
    importer instead of failing the whole batch.
    """

    company: str | None = None
    title: str | None = None
    status: str | None = None
    date_applied: datetime | None = None
    process_steps: list[str] | None = None
    outcome: str | None = None
    notes: str | None = None

    @field_validator("company", "title", "status", "outcome", "notes", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str | None:
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    @field_validator("date_applied", mode="before")
    @classmethod
    def _normalise_date(cls, value: Any) -> datetime | None:
        return coerce_datetime(value, allow_serial=True)

    @field_validator("process_steps", mode="before")
    @classmethod
    def _split_steps(cls, value: Any) -> list[str] | None:
        if value is None:
            return None
        if isinstance(value, str):
            return [step.strip() for step in value.split(",") if step.strip()]
        return value

    def is_valid(self) -> bool:
        """A row is importable when both natural-key fields are non-blank."""
        return bool(self.company and self.company.strip()) and bool(
            self.title and self.title.strip()
        )


class ImportRequest(BaseModel):
    """A batch of candidate rows."""

    rows: list[ImportCandidate] = Field(default_factory=list)


class TableImportRequest(BaseModel):
    """A parsed spreadsheet: header row plus positional data rows."""

    headers: list[str] = Field(..., description="Header row")
    rows: list[list[Any]] = Field(default_factory=list, description="Data rows")
    mapping: dict[str, str] | None = Field(
        default=None,
        description="Header to field mapping; auto-detected when omitted",
    )


class ImportResult(BaseModel):
    """Counts reported after a committed import."""

    added: int = 0
    updated: int = 0
    skipped: int = 0
