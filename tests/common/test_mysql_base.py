from __future__ import annotations

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.hr_portal.hr_portal.core.exceptions import ConflictError, StoreError
from src.hr_portal.hr_portal.database.bootstrap import iter_sql_statements
from src.hr_portal.hr_portal.database.mysql_base import build_where, db_cursor, is_duplicate_key
from src.hr_portal.hr_portal.salaries.mysql_salary_repository import MySQLSalaryRepository


class FakeCursor:
    def __init__(self, error=None):
        self._error = error
        self.executed = []
        self.closed = False
        self.rowcount = 0

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self._error is not None:
            raise self._error

    def fetchone(self):
        return None

    def fetchall(self):
        return []

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn=None, error=None):
        self._conn = conn
        self._error = error

    def connect(self):
        if self._error is not None:
            raise self._error
        return self._conn


def _duplicate():
    return mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)


def test_commit_on_success():
    conn = FakeConnection(FakeCursor())

    with db_cursor(FakeFactory(conn)) as (_, cur):
        cur.execute("SELECT 1")

    assert conn.committed and conn.closed
    assert not conn.rolled_back


def test_driver_error_becomes_store_error_and_rolls_back():
    conn = FakeConnection(FakeCursor(error=mysql.connector.ProgrammingError(msg="bad sql")))

    with pytest.raises(StoreError):
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("SELEC 1")

    assert conn.rolled_back and conn.closed
    assert not conn.committed


def test_integrity_error_propagates_unchanged():
    conn = FakeConnection(FakeCursor(error=_duplicate()))

    with pytest.raises(mysql.connector.IntegrityError) as exc:
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("INSERT ...")

    assert is_duplicate_key(exc.value)
    assert conn.rolled_back


def test_unreachable_database_is_store_error():
    factory = FakeFactory(error=mysql.connector.InterfaceError(msg="Can't connect"))

    with pytest.raises(StoreError) as exc:
        with db_cursor(factory):
            pass

    assert exc.value.message == "Database unavailable"


def test_salary_unique_key_violation_maps_to_conflict():
    conn = FakeConnection(FakeCursor(error=_duplicate()))
    repo = MySQLSalaryRepository(FakeFactory(conn))

    with pytest.raises(ConflictError):
        repo.create(
            employee_id="E1",
            month=6,
            year=2025,
            basic_salary=1,
            bonus=0,
            deductions=0,
            net_salary=1,
        )


def test_salary_update_rejects_unknown_columns():
    repo = MySQLSalaryRepository(FakeFactory(FakeConnection(FakeCursor())))

    with pytest.raises(ValueError):
        repo.update("r1", changes={"id": "other"})


def test_build_where():
    assert build_where([]) == "1=1"
    assert build_where(["a=%s", "b=%s"]) == "a=%s AND b=%s"


def test_sql_splitter_respects_quotes():
    sql = "CREATE TABLE t (x VARCHAR(5) DEFAULT ';');\nINSERT INTO t VALUES ('a;b');\n"

    assert list(iter_sql_statements(sql)) == [
        "CREATE TABLE t (x VARCHAR(5) DEFAULT ';')",
        "INSERT INTO t VALUES ('a;b')",
    ]
