from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import isoformat

DUPLICATE_PERIOD_MESSAGE = "A salary record already exists for this employee and period"


@dataclass(frozen=True)
class EmployeeRef:
    """Summary of the employee a salary record belongs to."""

    employee_id: str
    name: str
    employee_code: str

    def to_dict(self) -> dict:
        return {"id": self.employee_id, "name": self.name, "employeeId": self.employee_code}


@dataclass(frozen=True)
class SalaryRecord:
    record_id: str
    employee_id: str
    month: int
    year: int
    basic_salary: Decimal
    bonus: Decimal
    deductions: Decimal
    net_salary: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee: Optional[EmployeeRef] = field(default=None, compare=False)

    @property
    def period(self) -> tuple[str, int, int]:
        return (self.employee_id, self.month, self.year)

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "employeeId": self.employee_id,
            "month": self.month,
            "year": self.year,
            "basicSalary": float(self.basic_salary),
            "bonus": float(self.bonus),
            "deductions": float(self.deductions),
            "netSalary": float(self.net_salary),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
            "employee": self.employee.to_dict() if self.employee else None,
        }


@dataclass(frozen=True)
class NewSalaryRecord:
    """Validated input for creating a salary record."""

    employee_id: str
    month: int
    year: int
    basic_salary: Decimal
    bonus: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")


@dataclass(frozen=True)
class SalaryPatch:
    """Validated partial update; ``None`` means "leave unchanged"."""

    employee_id: Optional[str] = None
    month: Optional[int] = None
    year: Optional[int] = None
    basic_salary: Optional[Decimal] = None
    bonus: Optional[Decimal] = None
    deductions: Optional[Decimal] = None

    @property
    def touches_period(self) -> bool:
        return self.employee_id is not None or self.month is not None or self.year is not None

    @property
    def touches_amounts(self) -> bool:
        return self.basic_salary is not None or self.bonus is not None or self.deductions is not None

    def changes(self) -> dict:
        """Column -> value for every field present in the patch."""

        return {
            column: value
            for column, value in (
                ("employee_id", self.employee_id),
                ("month", self.month),
                ("year", self.year),
                ("basic_salary", self.basic_salary),
                ("bonus", self.bonus),
                ("deductions", self.deductions),
            )
            if value is not None
        }
