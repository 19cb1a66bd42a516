from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, is_row_referenced
from .model import DUPLICATE_CODE_MESSAGE, Employee, EmployeeInput
from .repository import EmployeeRepository

_SELECT = """
    SELECT id, employee_code, name, email, position, joining_date,
           basic_salary, is_active, owner_id, created_at, updated_at
    FROM employees
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=str(r["id"]),
        employee_code=r["employee_code"],
        name=r["name"],
        email=r.get("email"),
        position=r.get("position"),
        joining_date=r["joining_date"],
        basic_salary=Decimal(r["basic_salary"]),
        is_active=bool(r["is_active"]),
        owner_id=str(r["owner_id"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE id=%s", (employee_id,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE employee_code=%s", (employee_code,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def create(self, *, owner_id: str, data: EmployeeInput) -> Employee:
        employee_id = uuid.uuid4().hex
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(
                        id, employee_code, name, email, position, joining_date, basic_salary, is_active, owner_id
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        employee_id,
                        data.employee_code,
                        data.name,
                        data.email,
                        data.position,
                        data.joining_date,
                        data.basic_salary,
                        1 if data.is_active else 0,
                        owner_id,
                    ),
                )
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError(DUPLICATE_CODE_MESSAGE) from e
            raise NotFoundError("Owner not found") from e

        created = self.get_by_id(employee_id)
        if created is None:
            raise NotFoundError("Employee not found")
        return created

    def update(self, employee_id: str, *, data: EmployeeInput) -> Optional[Employee]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE employees
                    SET employee_code=%s, name=%s, email=%s, position=%s,
                        joining_date=%s, basic_salary=%s, is_active=%s
                    WHERE id=%s
                    """,
                    (
                        data.employee_code,
                        data.name,
                        data.email,
                        data.position,
                        data.joining_date,
                        data.basic_salary,
                        1 if data.is_active else 0,
                        employee_id,
                    ),
                )
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError(DUPLICATE_CODE_MESSAGE) from e
            raise
        return self.get_by_id(employee_id)

    def delete(self, employee_id: str) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM employees WHERE id=%s", (employee_id,))
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as e:
            if is_row_referenced(e):
                raise ConflictError("Employee still has salary records") from e
            raise

    def list_for_owner(self, owner_id: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE owner_id=%s ORDER BY created_at DESC, id", (owner_id,))
            return [_to_employee(r) for r in fetchall(cur)]
