"""Utility functions and classes."""

from applytics.utils.dates import coerce_datetime, excel_serial_to_datetime, utc_now
from applytics.utils.validators import ValidationResult, validate_new_application

__all__ = [
    "ValidationResult",
    "coerce_datetime",
    "excel_serial_to_datetime",
    "utc_now",
    "validate_new_application",
]
