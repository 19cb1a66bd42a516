from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional, Sequence

from ..core.enums import TaskPriority, TaskStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from .model import NewTask, Task
from .repository import TaskRepository

_SELECT = """
    SELECT id, project_id, title, description, priority, status,
           assignee_id, due_date, created_at, updated_at
    FROM tasks
"""

_UPDATABLE_COLUMNS = {"title", "description", "priority", "status", "assignee_id", "due_date"}

# Board order: open work first, then by priority.
_ORDER = """
    ORDER BY FIELD(status, 'TODO', 'IN_PROGRESS', 'IN_REVIEW', 'DONE'),
             FIELD(priority, 'URGENT', 'HIGH', 'MEDIUM', 'LOW'),
             created_at DESC
"""


def _to_task(r: dict) -> Task:
    return Task(
        task_id=str(r["id"]),
        project_id=str(r["project_id"]),
        title=r["title"],
        description=r["description"] or "",
        priority=TaskPriority(r["priority"]),
        status=TaskStatus(r["status"]),
        assignee_id=str(r["assignee_id"]) if r.get("assignee_id") else None,
        due_date=r.get("due_date"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, project_id: str, data: NewTask) -> Task:
        task_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(id, project_id, title, description, priority, status, assignee_id, due_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    task_id,
                    project_id,
                    data.title,
                    data.description,
                    data.priority.value,
                    data.status.value,
                    data.assignee_id,
                    data.due_date,
                ),
            )
        created = self.get_by_id(task_id)
        if created is None:
            raise NotFoundError("Task not found")
        return created

    def get_by_id(self, task_id: str) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE id=%s", (task_id,))
            r = fetchone(cur)
            return _to_task(r) if r else None

    def list(
        self,
        *,
        project_id: Optional[str] = None,
        assignee_id: Optional[str] = None,
        status: Optional[TaskStatus] = None,
    ) -> Sequence[Task]:
        clauses: list[str] = []
        params: list[object] = []
        if project_id is not None:
            clauses.append("project_id=%s")
            params.append(project_id)
        if assignee_id is not None:
            clauses.append("assignee_id=%s")
            params.append(assignee_id)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {build_where(clauses)}" + _ORDER, tuple(params))
            return [_to_task(r) for r in fetchall(cur)]

    def update(self, task_id: str, *, changes: dict) -> Optional[Task]:
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unsupported task columns: {sorted(unknown)}")

        if changes:
            columns = sorted(changes)
            assignments = ", ".join(f"{c}=%s" for c in columns)
            values = [changes[c].value if isinstance(changes[c], Enum) else changes[c] for c in columns]
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"UPDATE tasks SET {assignments} WHERE id=%s", tuple(values + [task_id]))
        return self.get_by_id(task_id)

    def delete(self, task_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE id=%s", (task_id,))
            return cur.rowcount > 0
