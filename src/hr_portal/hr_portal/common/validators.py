from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.constants import MAX_MONEY, MONEY_PLACES
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_CENT = Decimal(1).scaleb(-MONEY_PLACES)
_MAX_MONEY = Decimal(MAX_MONEY)


class FieldErrors:
    """Collects per-field validation messages so callers can report all of them at once."""

    def __init__(self) -> None:
        self._errors: dict[str, str] = {}

    def add(self, field_name: str, message: str) -> None:
        # First message wins for a field.
        self._errors.setdefault(field_name, message)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __contains__(self, field_name: str) -> bool:
        return field_name in self._errors

    def as_dict(self) -> dict[str, str]:
        return dict(self._errors)

    def raise_if_any(self, message: str = "Validation error") -> None:
        if self._errors:
            raise ValidationError(message, details=self._errors)


def clean_str(
    value: Any,
    field_name: str,
    errors: FieldErrors,
    *,
    required: bool = True,
    label: Optional[str] = None,
) -> Optional[str]:
    label = label or field_name
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            errors.add(field_name, f"{label} is required")
        return None
    if not isinstance(value, str):
        errors.add(field_name, f"{label} must be a string")
        return None
    return value.strip()


def clean_email(value: Any, field_name: str, errors: FieldErrors) -> Optional[str]:
    email = clean_str(value, field_name, errors, required=False)
    if email is None:
        return None
    if not _EMAIL_RE.match(email):
        errors.add(field_name, "Invalid email address")
        return None
    return email.lower()


def clean_int(
    value: Any,
    field_name: str,
    errors: FieldErrors,
    *,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
    message: Optional[str] = None,
) -> Optional[int]:
    """Accept ints and integral strings/floats (HTML forms send strings)."""

    if value is None or value == "":
        errors.add(field_name, f"{field_name} is required")
        return None

    if isinstance(value, bool):
        errors.add(field_name, f"{field_name} must be an integer")
        return None

    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and re.fullmatch(r"[+-]?\d+", value.strip()):
        number = int(value.strip())
    else:
        errors.add(field_name, f"{field_name} must be an integer")
        return None

    if (min_value is not None and number < min_value) or (max_value is not None and number > max_value):
        errors.add(field_name, message or f"{field_name} must be between {min_value} and {max_value}")
        return None
    return number


def clean_decimal(
    value: Any,
    field_name: str,
    errors: FieldErrors,
    *,
    default: Optional[Decimal] = None,
    positive: bool = False,
    message: Optional[str] = None,
) -> Optional[Decimal]:
    """Parse a non-negative (or strictly positive) money amount."""

    if value is None or value == "":
        if default is not None:
            return default
        errors.add(field_name, f"{field_name} is required")
        return None

    if isinstance(value, bool):
        errors.add(field_name, f"{field_name} must be a number")
        return None

    if isinstance(value, float) and not math.isfinite(value):
        errors.add(field_name, f"{field_name} must be a finite number")
        return None

    try:
        # str() first so floats keep their short repr (0.1 -> "0.1").
        amount = Decimal(str(value).strip()) if not isinstance(value, Decimal) else value
    except (InvalidOperation, ValueError):
        errors.add(field_name, f"{field_name} must be a number")
        return None

    if not amount.is_finite():
        errors.add(field_name, f"{field_name} must be a finite number")
        return None

    if positive and amount <= 0:
        errors.add(field_name, message or f"{field_name} must be positive")
        return None
    if amount < 0:
        errors.add(field_name, message or f"{field_name} cannot be negative")
        return None
    return amount


def clean_money(
    value: Any,
    field_name: str,
    errors: FieldErrors,
    *,
    label: Optional[str] = None,
    default: Optional[Decimal] = None,
    positive: bool = False,
    message: Optional[str] = None,
) -> Optional[Decimal]:
    """Like clean_decimal, limited to what a DECIMAL(12,2) column stores exactly."""

    amount = clean_decimal(value, field_name, errors, default=default, positive=positive, message=message)
    if amount is None:
        return None

    label = label or field_name
    if amount > _MAX_MONEY:
        errors.add(field_name, f"{label} cannot exceed {MAX_MONEY}")
        return None
    if amount != amount.quantize(_CENT):
        errors.add(field_name, f"{label} cannot have more than {MONEY_PLACES} decimal places")
        return None
    return amount.quantize(_CENT)


def clean_bool(value: Any, field_name: str, errors: FieldErrors, *, default: bool) -> Optional[bool]:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false", "1", "0", "on", "off"}:
        return value.strip().lower() in {"true", "1", "on"}
    errors.add(field_name, f"{field_name} must be a boolean")
    return None


def clean_date(value: Any, field_name: str, errors: FieldErrors, *, required: bool = True) -> Optional[date]:
    if value is None or value == "":
        if required:
            errors.add(field_name, f"{field_name} is required")
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value))
    except ValueError:
        errors.add(field_name, f"{field_name} must be a date (YYYY-MM-DD)")
        return None


def clean_datetime(value: Any, field_name: str, errors: FieldErrors, *, required: bool = True) -> Optional[datetime]:
    if value is None or value == "":
        if required:
            errors.add(field_name, f"{field_name} is required")
        return None
    if isinstance(value, datetime):
        return value
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        errors.add(field_name, f"{field_name} must be an ISO 8601 date-time")
        return None


def clean_id_list(value: Any, field_name: str, errors: FieldErrors) -> Optional[list[str]]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) and v.strip() for v in value):
        errors.add(field_name, f"{field_name} must be a list of ids")
        return None
    seen: dict[str, None] = {}
    for v in value:
        seen.setdefault(v.strip(), None)
    return list(seen)
