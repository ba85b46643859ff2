"""Lightweight payload validation helpers."""

from typing import Any, Dict

from utils.error_handling import ValidationError


def ensure_present(value: Any, field: str) -> None:
    """Raise ValidationError if value is missing or empty."""
    if value in (None, "", [], {}):
        raise ValidationError(f"{field} is required")


def require_fields(payload: Dict[str, Any], *fields: str) -> None:
    """Check every named field is present in a request payload."""
    for field in fields:
        ensure_present(payload.get(field), field)
