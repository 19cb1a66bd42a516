from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..core.enums import ProjectStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ManagerRef, Project, ProjectInput
from .repository import ProjectRepository

_SELECT = """
    SELECT p.id, p.name, p.description, p.status, p.start_date, p.end_date,
           p.manager_id, p.created_at, p.updated_at,
           u.name AS manager_name, u.email AS manager_email
    FROM projects p
    JOIN users u ON u.id = p.manager_id
"""

_VISIBLE = """
    (p.manager_id=%s OR EXISTS (
        SELECT 1 FROM project_members m WHERE m.project_id = p.id AND m.user_id=%s
    ))
"""

_UPDATABLE_COLUMNS = {"name", "description", "status", "start_date", "end_date"}


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _members(cur, project_ids: Sequence[str]) -> dict[str, list[str]]:
        out: dict[str, list[str]] = {pid: [] for pid in project_ids}
        if not project_ids:
            return out
        placeholders = ",".join(["%s"] * len(project_ids))
        cur.execute(
            f"SELECT project_id, user_id FROM project_members WHERE project_id IN ({placeholders}) ORDER BY user_id",
            tuple(project_ids),
        )
        for r in fetchall(cur):
            out[str(r["project_id"])].append(str(r["user_id"]))
        return out

    @staticmethod
    def _to_project(r: dict, members: Sequence[str]) -> Project:
        return Project(
            project_id=str(r["id"]),
            name=r["name"],
            description=r["description"] or "",
            status=ProjectStatus(r["status"]),
            start_date=r["start_date"],
            end_date=r.get("end_date"),
            manager_id=str(r["manager_id"]),
            team_members=tuple(members),
            created_at=r.get("created_at"),
            updated_at=r.get("updated_at"),
            manager=ManagerRef(user_id=str(r["manager_id"]), name=r["manager_name"], email=r["manager_email"]),
        )

    @staticmethod
    def _replace_members(cur, project_id: str, team_members: Sequence[str]) -> None:
        cur.execute("DELETE FROM project_members WHERE project_id=%s", (project_id,))
        if team_members:
            cur.executemany(
                "INSERT INTO project_members(project_id, user_id) VALUES(%s,%s)",
                [(project_id, user_id) for user_id in team_members],
            )

    def create(self, data: ProjectInput) -> Project:
        project_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO projects(id, name, description, status, start_date, end_date, manager_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    project_id,
                    data.name,
                    data.description,
                    data.status.value,
                    data.start_date,
                    data.end_date,
                    data.manager_id,
                ),
            )
            self._replace_members(cur, project_id, data.team_members)

        created = self.get_by_id(project_id)
        if created is None:
            raise NotFoundError("Project not found")
        return created

    def get_by_id(self, project_id: str) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.id=%s", (project_id,))
            r = fetchone(cur)
            if not r:
                return None
            members = self._members(cur, [project_id])
            return self._to_project(r, members[project_id])

    def list_visible(self, user_id: str, *, limit: int, offset: int) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + f"""
                WHERE {_VISIBLE}
                ORDER BY p.created_at DESC, p.id
                LIMIT %s OFFSET %s
                """,
                (user_id, user_id, int(limit), int(offset)),
            )
            rows = fetchall(cur)
            members = self._members(cur, [str(r["id"]) for r in rows])
            return [self._to_project(r, members[str(r["id"])]) for r in rows]

    def count_visible(self, user_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM projects p WHERE {_VISIBLE}", (user_id, user_id))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def update(
        self,
        project_id: str,
        *,
        changes: dict,
        team_members: Optional[Sequence[str]] = None,
    ) -> Optional[Project]:
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unsupported project columns: {sorted(unknown)}")

        with db_cursor(self._conn_factory) as (_, cur):
            if changes:
                columns = sorted(changes)
                assignments = ", ".join(f"{c}=%s" for c in columns)
                values = [changes[c].value if isinstance(changes[c], ProjectStatus) else changes[c] for c in columns]
                cur.execute(
                    f"UPDATE projects SET {assignments} WHERE id=%s",
                    tuple(values + [project_id]),
                )
            if team_members is not None:
                self._replace_members(cur, project_id, team_members)

        return self.get_by_id(project_id)

    def delete(self, project_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM projects WHERE id=%s", (project_id,))
            return cur.rowcount > 0
