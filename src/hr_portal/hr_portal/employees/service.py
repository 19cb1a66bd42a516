from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from ..auth.model import Principal
from ..common.validators import FieldErrors, clean_bool, clean_date, clean_email, clean_money, clean_str
from ..core.exceptions import ConflictError, NotFoundError
from ..salaries.model import SalaryRecord
from ..salaries.repository import SalaryRepository
from ..tasks.model import Task
from ..tasks.repository import TaskRepository
from .model import DUPLICATE_CODE_MESSAGE, Employee, EmployeeInput
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployeeDetail:
    employee: Employee
    salary_records: Sequence[SalaryRecord]
    tasks: Sequence[Task]

    def to_dict(self) -> dict:
        out = self.employee.to_dict()
        out["salaryRecords"] = [r.to_dict() for r in self.salary_records]
        out["tasks"] = [t.to_dict() for t in self.tasks]
        return out


def validate_employee(data: Mapping[str, Any]) -> EmployeeInput:
    errors = FieldErrors()
    values = dict(
        employee_code=clean_str(data.get("employeeId"), "employeeId", errors, label="Employee ID"),
        name=clean_str(data.get("name"), "name", errors, label="Name"),
        email=clean_email(data.get("email"), "email", errors),
        position=clean_str(data.get("position"), "position", errors, required=False),
        joining_date=clean_date(data.get("joiningDate"), "joiningDate", errors),
        basic_salary=clean_money(
            data.get("basicSalary"),
            "basicSalary",
            errors,
            label="Basic salary",
            positive=True,
            message="Basic salary must be positive",
        ),
        is_active=clean_bool(data.get("isActive"), "isActive", errors, default=True),
    )
    errors.raise_if_any()
    return EmployeeInput(**values)


class EmployeeService:
    """Use cases for employee records, scoped to the principal that created them."""

    def __init__(self, employees: EmployeeRepository, salaries: SalaryRepository, tasks: TaskRepository):
        self._employees = employees
        self._salaries = salaries
        self._tasks = tasks

    def _owned(self, principal: Principal, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if employee is None or employee.owner_id != principal.user_id:
            raise NotFoundError("Employee not found")
        return employee

    def _ensure_code_free(self, employee_code: str, *, exclude_id: Optional[str] = None) -> None:
        existing = self._employees.get_by_code(employee_code)
        if existing is not None and existing.employee_id != exclude_id:
            raise ConflictError(DUPLICATE_CODE_MESSAGE, details={"employeeId": DUPLICATE_CODE_MESSAGE})

    def list_employees(self, principal: Principal) -> Sequence[Employee]:
        return self._employees.list_for_owner(principal.user_id)

    def get_employee(self, principal: Principal, employee_id: str) -> EmployeeDetail:
        employee = self._owned(principal, employee_id)
        return EmployeeDetail(
            employee=employee,
            salary_records=self._salaries.list(employee_id=employee.employee_id, limit=100, offset=0),
            tasks=self._tasks.list(assignee_id=employee.employee_id),
        )

    def create_employee(self, principal: Principal, data: Mapping[str, Any]) -> Employee:
        new = validate_employee(data)
        self._ensure_code_free(new.employee_code)
        employee = self._employees.create(owner_id=principal.user_id, data=new)
        logger.info("Created employee %s (%s)", employee.employee_id, employee.employee_code)
        return employee

    def update_employee(self, principal: Principal, employee_id: str, data: Mapping[str, Any]) -> Employee:
        current = self._owned(principal, employee_id)
        changes = validate_employee(data)
        self._ensure_code_free(changes.employee_code, exclude_id=current.employee_id)

        updated = self._employees.update(current.employee_id, data=changes)
        if updated is None:
            raise NotFoundError("Employee not found")
        return updated

    def delete_employee(self, principal: Principal, employee_id: str) -> None:
        """Restrict-delete: an employee with salary history cannot be removed."""

        employee = self._owned(principal, employee_id)
        if self._salaries.count(employee_id=employee.employee_id) > 0:
            raise ConflictError(
                "Employee still has salary records",
                details={"id": "Delete or reassign the employee's salary records first"},
            )
        if not self._employees.delete(employee.employee_id):
            raise NotFoundError("Employee not found")
        logger.info("Deleted employee %s", employee.employee_id)
