from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import TaskStatus
from .model import NewTask, Task


class TaskRepository(Protocol):
    def create(self, *, project_id: str, data: NewTask) -> Task:
        raise NotImplementedError

    def get_by_id(self, task_id: str) -> Optional[Task]:
        raise NotImplementedError

    def list(
        self,
        *,
        project_id: Optional[str] = None,
        assignee_id: Optional[str] = None,
        status: Optional[TaskStatus] = None,
    ) -> Sequence[Task]:
        raise NotImplementedError

    def update(self, task_id: str, *, changes: dict) -> Optional[Task]:
        raise NotImplementedError

    def delete(self, task_id: str) -> bool:
        raise NotImplementedError
