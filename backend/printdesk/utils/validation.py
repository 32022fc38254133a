from __future__ import annotations
"""Reusable validation helpers for request payloads.

Each helper returns the cleaned value (to enable inline usage) or raises
ValidationError with a consistent message.
"""
from typing import Any, Iterable, Mapping, Optional
from printdesk.errors import ValidationError


def validate_status(new_status: str, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Validate that new_status is inside allowed."""
    if new_status not in allowed:
        raise ValidationError(f"{field_name} invalid")
    return new_status


def validate_choice(value: Any, allowed: Iterable[str], field_name: str) -> str:
    allowed = tuple(allowed)
    if value not in allowed:
        raise ValidationError(f"{field_name} must be one of {', '.join(allowed)}")
    return value


def require_fields(data: Mapping[str, Any], names: Iterable[str]):
    missing = [n for n in names if data.get(n) in (None, '') or (isinstance(data.get(n), str) and not data.get(n).strip())]
    if missing:
        raise ValidationError(f"{', '.join(missing)} required")


def positive_int(value: Any, field_name: str, maximum: Optional[int] = None) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a positive integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field_name} must be a positive integer")
    if number < 1:
        raise ValidationError(f"{field_name} must be a positive integer")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field_name} must not exceed {maximum}")
    return number


def optional_text(value: Any, field_name: str, max_length: Optional[int] = None) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    value = value.strip()
    if not value:
        return None
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field_name} too long")
    return value

__all__ = ['validate_status', 'validate_choice', 'require_fields', 'positive_int', 'optional_text']
