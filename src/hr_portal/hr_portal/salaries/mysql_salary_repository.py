from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import DUPLICATE_PERIOD_MESSAGE, EmployeeRef, SalaryRecord
from .repository import SalaryRepository

logger = logging.getLogger(__name__)

_SELECT = """
    SELECT s.id, s.employee_id, s.month, s.year,
           s.basic_salary, s.bonus, s.deductions, s.net_salary,
           s.created_at, s.updated_at,
           e.name AS employee_name, e.employee_code
    FROM salary_records s
    JOIN employees e ON e.id = s.employee_id
"""

_UPDATABLE_COLUMNS = {"employee_id", "month", "year", "basic_salary", "bonus", "deductions", "net_salary"}


def _to_record(r: dict) -> SalaryRecord:
    return SalaryRecord(
        record_id=str(r["id"]),
        employee_id=str(r["employee_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        basic_salary=Decimal(r["basic_salary"]),
        bonus=Decimal(r["bonus"]),
        deductions=Decimal(r["deductions"]),
        net_salary=Decimal(r["net_salary"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee=EmployeeRef(
            employee_id=str(r["employee_id"]),
            name=r["employee_name"],
            employee_code=r["employee_code"],
        ),
    )


def _filters(employee_id: Optional[str], month: Optional[int], year: Optional[int]) -> tuple[str, list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if employee_id is not None:
        clauses.append("s.employee_id=%s")
        params.append(employee_id)
    if month is not None:
        clauses.append("s.month=%s")
        params.append(int(month))
    if year is not None:
        clauses.append("s.year=%s")
        params.append(int(year))
    return build_where(clauses), params


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        record_id = uuid.uuid4().hex
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO salary_records(
                        id, employee_id, month, year, basic_salary, bonus, deductions, net_salary
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (record_id, employee_id, int(month), int(year), basic_salary, bonus, deductions, net_salary),
                )
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                logger.warning("Unique key rejected salary record for %s %s/%s", employee_id, month, year)
                raise ConflictError(DUPLICATE_PERIOD_MESSAGE) from e
            raise NotFoundError("Employee not found") from e

        created = self.get_by_id(record_id)
        if created is None:
            raise NotFoundError("Salary record not found")
        return created

    def get_by_id(self, record_id: str) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.id=%s", (record_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_by_period(
        self,
        *,
        employee_id: str,
        month: int,
        year: int,
        exclude_id: Optional[str] = None,
    ) -> Optional[SalaryRecord]:
        where, params = _filters(employee_id, month, year)
        if exclude_id is not None:
            where += " AND s.id<>%s"
            params.append(exclude_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where} LIMIT 1", tuple(params))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list(
        self,
        *,
        employee_id: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Sequence[SalaryRecord]:
        where, params = _filters(employee_id, month, year)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + f"""
                WHERE {where}
                ORDER BY s.year DESC, s.month DESC, s.created_at DESC, s.id
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count(
        self,
        *,
        employee_id: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> int:
        where, params = _filters(employee_id, month, year)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM salary_records s WHERE {where}", tuple(params))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def update(self, record_id: str, *, changes: dict) -> Optional[SalaryRecord]:
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unsupported salary columns: {sorted(unknown)}")

        if changes:
            columns = sorted(changes)
            assignments = ", ".join(f"{c}=%s" for c in columns)
            try:
                with db_cursor(self._conn_factory) as (_, cur):
                    cur.execute(
                        f"UPDATE salary_records SET {assignments} WHERE id=%s",
                        tuple([changes[c] for c in columns] + [record_id]),
                    )
            except mysql.connector.IntegrityError as e:
                if is_duplicate_key(e):
                    raise ConflictError(DUPLICATE_PERIOD_MESSAGE) from e
                raise NotFoundError("Employee not found") from e

        return self.get_by_id(record_id)

    def delete(self, record_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salary_records WHERE id=%s", (record_id,))
            return cur.rowcount > 0
