from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from ..auth.model import Principal
from ..auth.repository import UserRepository
from ..common.pagination import Page, page_request
from ..common.validators import FieldErrors, clean_datetime, clean_id_list, clean_str
from ..core.enums import ProjectStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Project, ProjectInput
from .repository import ProjectRepository

logger = logging.getLogger(__name__)

_STATUSES = ", ".join(s.value for s in ProjectStatus)


def _clean_status(value: Any, errors: FieldErrors, *, default: Optional[ProjectStatus]) -> Optional[ProjectStatus]:
    if value is None or value == "":
        return default
    try:
        return ProjectStatus(value)
    except ValueError:
        errors.add("status", f"Status must be one of: {_STATUSES}")
        return None


def _check_dates(start: Optional[datetime], end: Optional[datetime], errors: FieldErrors) -> None:
    if start is not None and end is not None and end < start:
        errors.add("endDate", "End date cannot be before start date")


class ProjectService:
    """Use cases for projects; visibility is manager-or-team-member."""

    def __init__(self, projects: ProjectRepository, users: UserRepository):
        self._projects = projects
        self._users = users

    def _check_users_exist(self, user_ids: list[str]) -> None:
        missing = sorted(set(user_ids) - self._users.existing_ids(user_ids))
        if missing:
            raise ValidationError(
                "Unknown team members",
                details={"teamMembers": f"Unknown user ids: {', '.join(missing)}"},
            )

    def get_project(self, principal: Principal, project_id: str) -> Project:
        project = self._projects.get_by_id(project_id)
        if project is None or not project.can_view(principal.user_id):
            raise NotFoundError("Project not found")
        return project

    def _managed(self, principal: Principal, project_id: str) -> Project:
        project = self.get_project(principal, project_id)
        if project.manager_id != principal.user_id:
            raise AuthorizationError("Only the project manager can change this project")
        return project

    def list_projects(self, principal: Principal, *, page: Any = None, limit: Any = None) -> Page[Project]:
        req = page_request(page, limit)
        items = self._projects.list_visible(principal.user_id, limit=req.limit, offset=req.offset)
        total = self._projects.count_visible(principal.user_id)
        return Page(items=items, total=total, page=req.page, limit=req.limit)

    def create_project(self, principal: Principal, data: Mapping[str, Any]) -> Project:
        errors = FieldErrors()
        name = clean_str(data.get("name"), "name", errors, label="Name")
        description = clean_str(data.get("description"), "description", errors, required=False) or ""
        status = _clean_status(data.get("status"), errors, default=ProjectStatus.ACTIVE)
        start_date = clean_datetime(data.get("startDate"), "startDate", errors)
        end_date = clean_datetime(data.get("endDate"), "endDate", errors, required=False)
        manager_id = clean_str(data.get("managerId"), "managerId", errors, label="Manager ID")
        team_members = clean_id_list(data.get("teamMembers"), "teamMembers", errors)
        _check_dates(start_date, end_date, errors)
        errors.raise_if_any("Validation failed")

        if self._users.get_by_id(manager_id) is None:
            raise NotFoundError("Manager not found")
        self._check_users_exist(team_members)

        project = self._projects.create(
            ProjectInput(
                name=name,
                description=description,
                status=status,
                start_date=start_date,
                end_date=end_date,
                manager_id=manager_id,
                team_members=tuple(team_members),
            )
        )
        logger.info("Project %s created by %s", project.project_id, principal.user_id)
        return project

    def update_project(self, principal: Principal, project_id: str, data: Mapping[str, Any]) -> Project:
        current = self._managed(principal, project_id)

        errors = FieldErrors()
        changes: dict[str, Any] = {}
        if "name" in data:
            changes["name"] = clean_str(data.get("name"), "name", errors, label="Name")
        if "description" in data:
            changes["description"] = clean_str(data.get("description"), "description", errors, required=False) or ""
        if data.get("status") is not None:
            changes["status"] = _clean_status(data.get("status"), errors, default=None)
        if data.get("startDate") is not None:
            changes["start_date"] = clean_datetime(data.get("startDate"), "startDate", errors)
        if "endDate" in data:
            changes["end_date"] = clean_datetime(data.get("endDate"), "endDate", errors, required=False)
        team_members = None
        if "teamMembers" in data:
            team_members = clean_id_list(data.get("teamMembers"), "teamMembers", errors)
        _check_dates(
            changes.get("start_date", current.start_date),
            changes.get("end_date", current.end_date),
            errors,
        )
        errors.raise_if_any("Validation failed")

        if team_members:
            self._check_users_exist(team_members)

        updated = self._projects.update(current.project_id, changes=changes, team_members=team_members)
        if updated is None:
            raise NotFoundError("Project not found")
        return updated

    def delete_project(self, principal: Principal, project_id: str) -> None:
        project = self._managed(principal, project_id)
        if not self._projects.delete(project.project_id):
            raise NotFoundError("Project not found")
        logger.info("Project %s deleted by %s", project_id, principal.user_id)
