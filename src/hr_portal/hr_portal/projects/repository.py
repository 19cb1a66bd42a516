from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Project, ProjectInput


class ProjectRepository(Protocol):
    """Projects plus their membership rows (project_members join table)."""

    def create(self, data: ProjectInput) -> Project:
        raise NotImplementedError

    def get_by_id(self, project_id: str) -> Optional[Project]:
        raise NotImplementedError

    def list_visible(self, user_id: str, *, limit: int, offset: int) -> Sequence[Project]:
        """Projects managed by or shared with ``user_id``, newest first."""

        raise NotImplementedError

    def count_visible(self, user_id: str) -> int:
        raise NotImplementedError

    def update(
        self,
        project_id: str,
        *,
        changes: dict,
        team_members: Optional[Sequence[str]] = None,
    ) -> Optional[Project]:
        """Apply column changes; replace membership when ``team_members`` is given."""

        raise NotImplementedError

    def delete(self, project_id: str) -> bool:
        raise NotImplementedError
