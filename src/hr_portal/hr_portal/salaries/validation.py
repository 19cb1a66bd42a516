"""Input validation for salary records.

Every failing field is reported in ``ValidationError.details``; nothing is
accepted partially.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping

from ..common.validators import FieldErrors, clean_int, clean_money, clean_str
from ..core.constants import MAX_MONTH, MAX_YEAR, MIN_MONTH, MIN_YEAR
from ..core.exceptions import ValidationError
from .model import NewSalaryRecord, SalaryPatch

ZERO = Decimal("0")

_MONTH_MSG = f"Month must be between {MIN_MONTH}-{MAX_MONTH}"
_YEAR_MSG = f"Year must be between {MIN_YEAR}-{MAX_YEAR}"

# Request field -> attribute on SalaryPatch.
PATCHABLE_FIELDS = {
    "employeeId": "employee_id",
    "month": "month",
    "year": "year",
    "basicSalary": "basic_salary",
    "bonus": "bonus",
    "deductions": "deductions",
}


def _clean_field(name: str, value: Any, errors: FieldErrors, *, default_zero: bool = False):
    if name == "employeeId":
        return clean_str(value, name, errors, label="Employee ID")
    if name == "month":
        return clean_int(value, name, errors, min_value=MIN_MONTH, max_value=MAX_MONTH, message=_MONTH_MSG)
    if name == "year":
        return clean_int(value, name, errors, min_value=MIN_YEAR, max_value=MAX_YEAR, message=_YEAR_MSG)
    if name == "basicSalary":
        return clean_money(value, name, errors, label="Basic salary", message="Basic salary cannot be negative")
    if name == "bonus":
        return clean_money(
            value, name, errors, label="Bonus", default=ZERO if default_zero else None, message="Bonus cannot be negative"
        )
    if name == "deductions":
        return clean_money(
            value,
            name,
            errors,
            label="Deductions",
            default=ZERO if default_zero else None,
            message="Deductions cannot be negative",
        )
    raise KeyError(name)


def validate_new_record(data: Mapping[str, Any]) -> NewSalaryRecord:
    errors = FieldErrors()
    values = {
        PATCHABLE_FIELDS[name]: _clean_field(name, data.get(name), errors, default_zero=True)
        for name in PATCHABLE_FIELDS
    }
    errors.raise_if_any()
    return NewSalaryRecord(**values)


def validate_patch(data: Mapping[str, Any]) -> SalaryPatch:
    """Validate only the fields present; ``null`` counts as absent.

    ``netSalary`` and unknown keys are ignored: net salary is always derived.
    """

    errors = FieldErrors()
    values: dict[str, Any] = {}
    for name, attr in PATCHABLE_FIELDS.items():
        if data.get(name) is None:
            continue
        values[attr] = _clean_field(name, data[name], errors)
    errors.raise_if_any()

    if not values:
        fields = ", ".join(PATCHABLE_FIELDS)
        raise ValidationError("No fields to update", details={"body": f"Provide at least one of: {fields}"})
    return SalaryPatch(**values)
