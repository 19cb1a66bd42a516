from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.pagination import Page, page_request
from ..common.validators import FieldErrors, clean_int, clean_str
from ..core.constants import MAX_MONEY, MAX_MONTH, MAX_YEAR, MIN_MONTH, MIN_YEAR
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import StandardSalaryCalculator
from .model import DUPLICATE_PERIOD_MESSAGE, SalaryRecord
from .repository import SalaryRepository
from .validation import validate_new_record, validate_patch

logger = logging.getLogger(__name__)

_MAX_MONEY = Decimal(MAX_MONEY)


class SalaryService:
    """Use cases for salary records: create, read, list, patch, delete.

    Net salary is always derived here; a caller-supplied value is never stored.
    The period check below is backed by the UNIQUE key in the schema, which
    the repository reports as ConflictError under concurrent writers.
    """

    def __init__(
        self,
        salaries: SalaryRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[SalaryCalculator] = None,
    ):
        self._salaries = salaries
        self._employees = employees
        self._calculator = calculator or StandardSalaryCalculator()

    def _require_employee(self, employee_id: str) -> None:
        """Existence check only.

        Salary records are not owner-scoped: any signed-in user may record pay
        for any employee, unlike the owner-scoped employee endpoints.
        """

        if self._employees.get_by_id(employee_id) is None:
            raise NotFoundError("Employee not found", details={"employeeId": f"No employee with id {employee_id}"})

    def _net_salary(self, basic_salary: Decimal, bonus: Decimal, deductions: Decimal) -> Decimal:
        net = self._calculator.net_salary(basic_salary, bonus, deductions)
        if abs(net) > _MAX_MONEY:
            message = f"Net salary must be between -{MAX_MONEY} and {MAX_MONEY}"
            raise ValidationError(message, details={"netSalary": message})
        return net

    def _ensure_period_free(self, *, employee_id: str, month: int, year: int, exclude_id: Optional[str] = None) -> None:
        existing = self._salaries.find_by_period(employee_id=employee_id, month=month, year=year, exclude_id=exclude_id)
        if existing is not None:
            logger.info("Duplicate salary period %s %02d/%d (existing %s)", employee_id, month, year, existing.record_id)
            raise ConflictError(DUPLICATE_PERIOD_MESSAGE)

    def create_record(self, data: Mapping[str, Any]) -> SalaryRecord:
        new = validate_new_record(data)
        self._require_employee(new.employee_id)
        self._ensure_period_free(employee_id=new.employee_id, month=new.month, year=new.year)

        record = self._salaries.create(
            employee_id=new.employee_id,
            month=new.month,
            year=new.year,
            basic_salary=new.basic_salary,
            bonus=new.bonus,
            deductions=new.deductions,
            net_salary=self._net_salary(new.basic_salary, new.bonus, new.deductions),
        )
        logger.info("Created salary record %s for %s %02d/%d", record.record_id, new.employee_id, new.month, new.year)
        return record

    def get_record(self, record_id: str) -> SalaryRecord:
        record = self._salaries.get_by_id(record_id)
        if record is None:
            raise NotFoundError("Salary record not found")
        return record

    def list_records(
        self,
        *,
        employee_id: Optional[str] = None,
        month: Any = None,
        year: Any = None,
        page: Any = None,
        limit: Any = None,
    ) -> Page[SalaryRecord]:
        errors = FieldErrors()
        employee_id = clean_str(employee_id, "employeeId", errors, required=False)
        month = None if month in (None, "") else clean_int(month, "month", errors, min_value=MIN_MONTH, max_value=MAX_MONTH)
        year = None if year in (None, "") else clean_int(year, "year", errors, min_value=MIN_YEAR, max_value=MAX_YEAR)
        errors.raise_if_any("Invalid filter parameters")

        req = page_request(page, limit)
        items = self._salaries.list(
            employee_id=employee_id, month=month, year=year, limit=req.limit, offset=req.offset
        )
        total = self._salaries.count(employee_id=employee_id, month=month, year=year)
        return Page(items=items, total=total, page=req.page, limit=req.limit)

    def update_record(self, record_id: str, data: Mapping[str, Any]) -> SalaryRecord:
        patch = validate_patch(data)
        current = self.get_record(record_id)

        if patch.employee_id is not None and patch.employee_id != current.employee_id:
            self._require_employee(patch.employee_id)

        if patch.touches_period:
            self._ensure_period_free(
                employee_id=patch.employee_id or current.employee_id,
                month=patch.month if patch.month is not None else current.month,
                year=patch.year if patch.year is not None else current.year,
                exclude_id=current.record_id,
            )

        changes = patch.changes()
        if patch.touches_amounts:
            changes["net_salary"] = self._net_salary(
                patch.basic_salary if patch.basic_salary is not None else current.basic_salary,
                patch.bonus if patch.bonus is not None else current.bonus,
                patch.deductions if patch.deductions is not None else current.deductions,
            )

        updated = self._salaries.update(current.record_id, changes=changes)
        if updated is None:
            raise NotFoundError("Salary record not found")
        logger.info("Updated salary record %s (%s)", record_id, ", ".join(sorted(changes)))
        return updated

    def delete_record(self, record_id: str) -> None:
        if not self._salaries.delete(record_id):
            raise NotFoundError("Salary record not found")
        logger.info("Deleted salary record %s", record_id)
