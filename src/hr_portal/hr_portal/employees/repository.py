from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, EmployeeInput


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, *, owner_id: str, data: EmployeeInput) -> Employee:
        raise NotImplementedError

    def update(self, employee_id: str, *, data: EmployeeInput) -> Optional[Employee]:
        raise NotImplementedError

    def delete(self, employee_id: str) -> bool:
        raise NotImplementedError

    def list_for_owner(self, owner_id: str) -> Sequence[Employee]:
        """Newest first."""

        raise NotImplementedError
