from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_positive_number(value, field_name: str) -> Decimal:
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not number.is_finite() or number <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return number


def require_hours(value, field_name: str, *, maximum, places: int) -> Decimal:
    """Positive, at most `maximum` and with no more than `places` decimals."""
    number = require_positive_number(value, field_name)
    if number > maximum:
        raise ValidationError(f"{field_name} must be at most {maximum}")
    if number != number.quantize(Decimal(1).scaleb(-places)):
        raise ValidationError(f"{field_name} must have at most {places} decimal places")
    return number


def optional_text(value: Optional[str]) -> Optional[str]:
    """Empty strings are stored as NULL."""
    if value is None:
        return None
    value = value.strip()
    return value or None
