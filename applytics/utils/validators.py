"""Validation logic for application records."""

from dataclasses import dataclass, field
from typing import Any

REQUIRED_FIELDS = ("company", "title")

# Fields that may be supplied to an update but never set to null.
NON_NULLABLE_FIELDS = (
    "company",
    "title",
    "status",
    "date_applied",
    "process_steps",
    "current_step_index",
    "notes",
)

UPDATABLE_FIELDS = (*NON_NULLABLE_FIELDS, "outcome")


@dataclass
class ValidationResult:
    """Result of validation process."""

    is_valid: bool
    error: str | None = None
    field_name: str | None = None
    warnings: list[str] = field(default_factory=list)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_new_application(company: str | None, title: str | None) -> ValidationResult:
    """Company and title are both required and must not be blank."""
    for name, value in (("company", company), ("title", title)):
        if _is_blank(value):
            return ValidationResult(
                is_valid=False,
                field_name=name,
                error=f"Field '{name}' must not be empty",
            )
    return ValidationResult(is_valid=True)


def validate_update_fields(updates: dict[str, Any]) -> ValidationResult:
    """Check a partial update before any write happens."""
    warnings = []

    for name in updates:
        if name not in UPDATABLE_FIELDS:
            return ValidationResult(
                is_valid=False, field_name=name, error=f"Field '{name}' cannot be updated"
            )

    for name in (*REQUIRED_FIELDS, "status"):
        if name in updates and _is_blank(updates[name]):
            return ValidationResult(
                is_valid=False,
                field_name=name,
                error=f"Field '{name}' must not be empty",
            )

    for name in NON_NULLABLE_FIELDS:
        if name in updates and updates[name] is None:
            return ValidationResult(
                is_valid=False, field_name=name, error=f"Field '{name}' cannot be null"
            )

    steps = updates.get("process_steps")
    index = updates.get("current_step_index")
    if steps is not None and index is not None and steps and index >= len(steps):
        warnings.append("current_step_index points past the last process step")

    return ValidationResult(is_valid=True, warnings=warnings)
