from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import isoformat

DUPLICATE_CODE_MESSAGE = "An employee with this employee ID already exists"


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    ``employee_code`` is the external business code (``employeeId`` in the API);
    ``employee_id`` is the opaque primary key salary records point at.
    """

    employee_id: str
    employee_code: str
    name: str
    email: Optional[str]
    position: Optional[str]
    joining_date: date
    basic_salary: Decimal
    is_active: bool
    owner_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "employeeId": self.employee_code,
            "name": self.name,
            "email": self.email,
            "position": self.position,
            "joiningDate": isoformat(self.joining_date),
            "basicSalary": float(self.basic_salary),
            "isActive": self.is_active,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


@dataclass(frozen=True)
class EmployeeInput:
    """Validated create/update payload."""

    employee_code: str
    name: str
    email: Optional[str]
    position: Optional[str]
    joining_date: date
    basic_salary: Decimal
    is_active: bool = True
