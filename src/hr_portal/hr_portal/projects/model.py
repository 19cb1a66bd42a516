from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.enums import ProjectStatus


@dataclass(frozen=True)
class ManagerRef:
    user_id: str
    name: str
    email: str

    def to_dict(self) -> dict:
        return {"id": self.user_id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class Project:
    project_id: str
    name: str
    description: str
    status: ProjectStatus
    start_date: datetime
    end_date: Optional[datetime]
    manager_id: str
    team_members: tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    manager: Optional[ManagerRef] = field(default=None, compare=False)

    def can_view(self, user_id: str) -> bool:
        """A user may view a project iff they manage it or are on its team."""
        return user_id == self.manager_id or user_id in self.team_members

    def to_dict(self) -> dict:
        return {
            "id": self.project_id,
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "startDate": isoformat(self.start_date),
            "endDate": isoformat(self.end_date),
            "managerId": self.manager_id,
            "teamMembers": list(self.team_members),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
            "manager": self.manager.to_dict() if self.manager else None,
        }


@dataclass(frozen=True)
class ProjectInput:
    name: str
    description: str
    status: ProjectStatus
    start_date: datetime
    end_date: Optional[datetime]
    manager_id: str
    team_members: tuple[str, ...] = ()
