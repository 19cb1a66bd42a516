from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import SalaryRecord


class SalaryRepository(Protocol):
    """Store accessor for salary records.

    Implementations raise ConflictError when the storage-level unique key on
    (employee_id, month, year) rejects a write.
    """

    def create(
        self,
        *,
        employee_id: str,
        month: int,
        year: int,
        basic_salary: Decimal,
        bonus: Decimal,
        deductions: Decimal,
        net_salary: Decimal,
    ) -> SalaryRecord:
        raise NotImplementedError

    def get_by_id(self, record_id: str) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def find_by_period(
        self,
        *,
        employee_id: str,
        month: int,
        year: int,
        exclude_id: Optional[str] = None,
    ) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def list(
        self,
        *,
        employee_id: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Sequence[SalaryRecord]:
        """Records ordered by year desc, month desc."""

        raise NotImplementedError

    def count(
        self,
        *,
        employee_id: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, record_id: str, *, changes: dict) -> Optional[SalaryRecord]:
        """Apply column changes; return the updated record or None if it is gone."""

        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        raise NotImplementedError
