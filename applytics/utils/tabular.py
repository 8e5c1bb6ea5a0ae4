"""Turn a parsed spreadsheet (header row + positional rows) into import candidates."""

import logging
from typing import Any

from pydantic import ValidationError as SchemaValidationError

from applytics.schemas.importer import ImportCandidate

logger = logging.getLogger(__name__)

IMPORTABLE_FIELDS = (
    "company",
    "title",
    "status",
    "date_applied",
    "process_steps",
    "outcome",
    "notes",
)

# Checked in order; the first matching rule wins.
HEADER_RULES = (
    (("company",), "company"),
    (("title", "role"), "title"),
    (("status",), "status"),
    (("date",), "date_applied"),
)


def auto_map_headers(headers: list[str]) -> dict[str, str]:
    """Guess the field of each header from its name (case-insensitive)."""
    mapping = {}
    for header in headers:
        normalized = str(header).lower()
        for needles, field in HEADER_RULES:
            if any(needle in normalized for needle in needles):
                mapping[header] = field
                break
    return mapping


def _cell(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def rows_to_candidates(
    headers: list[str],
    rows: list[list[Any]],
    mapping: dict[str, str] | None = None,
) -> tuple[list[ImportCandidate], int]:
    """Build candidates from positional rows.

    Returns the candidates and the number of rows whose cells could not be
    parsed (for example an unreadable date). Columns mapped to an unknown
    field, or not mapped at all, are ignored.
    """
    if mapping is None:
        mapping = auto_map_headers(headers)

    columns = [
        (index, mapping.get(header))
        for index, header in enumerate(headers)
        if mapping.get(header) in IMPORTABLE_FIELDS
    ]

    candidates = []
    rejected = 0
    for row_number, row in enumerate(rows, start=1):
        data = {}
        for index, field in columns:
            if index < len(row):
                data[field] = _cell(row[index])
        try:
            candidates.append(ImportCandidate.model_validate(data))
        except SchemaValidationError as e:
            rejected += 1
            logger.warning(f"Skipping import row {row_number}: {e.errors()[0]['msg']}")

    return candidates, rejected
