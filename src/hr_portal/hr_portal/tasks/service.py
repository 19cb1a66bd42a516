from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..auth.model import Principal
from ..common.validators import FieldErrors, clean_date, clean_str
from ..core.enums import TaskPriority, TaskStatus
from ..core.exceptions import NotFoundError
from ..employees.repository import EmployeeRepository
from ..projects.service import ProjectService
from .model import NewTask, Task
from .repository import TaskRepository


def _clean_enum(enum_cls, value: Any, field_name: str, errors: FieldErrors):
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        errors.add(field_name, f"{field_name} must be one of: {', '.join(e.value for e in enum_cls)}")
        return None


class TaskService:
    """Tasks live inside projects: every operation first checks project visibility."""

    def __init__(self, tasks: TaskRepository, projects: ProjectService, employees: EmployeeRepository):
        self._tasks = tasks
        self._projects = projects
        self._employees = employees

    def _visible_task(self, principal: Principal, task_id: str) -> Task:
        task = self._tasks.get_by_id(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        self._projects.get_project(principal, task.project_id)
        return task

    def _clean_assignee(self, value: Any, errors: FieldErrors) -> Optional[str]:
        assignee_id = clean_str(value, "assigneeId", errors, required=False)
        if assignee_id is not None and self._employees.get_by_id(assignee_id) is None:
            errors.add("assigneeId", "Assignee not found")
            return None
        return assignee_id

    def list_tasks(
        self,
        principal: Principal,
        project_id: str,
        *,
        status: Any = None,
        assignee_id: Optional[str] = None,
    ) -> Sequence[Task]:
        project = self._projects.get_project(principal, project_id)
        errors = FieldErrors()
        status_filter = None if not status else _clean_enum(TaskStatus, status, "status", errors)
        errors.raise_if_any("Invalid filter parameters")
        return self._tasks.list(project_id=project.project_id, assignee_id=assignee_id or None, status=status_filter)

    def create_task(self, principal: Principal, project_id: str, data: Mapping[str, Any]) -> Task:
        project = self._projects.get_project(principal, project_id)

        errors = FieldErrors()
        title = clean_str(data.get("title"), "title", errors, label="Task title")
        description = clean_str(data.get("description"), "description", errors, required=False) or ""
        priority = TaskPriority.MEDIUM
        if data.get("priority"):
            priority = _clean_enum(TaskPriority, data["priority"], "priority", errors)
        status = TaskStatus.TODO
        if data.get("status"):
            status = _clean_enum(TaskStatus, data["status"], "status", errors)
        due_date = clean_date(data.get("dueDate"), "dueDate", errors, required=False)
        assignee_id = self._clean_assignee(data.get("assigneeId"), errors)
        errors.raise_if_any()

        return self._tasks.create(
            project_id=project.project_id,
            data=NewTask(
                title=title,
                description=description,
                priority=priority,
                status=status,
                assignee_id=assignee_id,
                due_date=due_date,
            ),
        )

    def update_task(self, principal: Principal, task_id: str, data: Mapping[str, Any]) -> Task:
        task = self._visible_task(principal, task_id)

        errors = FieldErrors()
        changes: dict[str, Any] = {}
        if "title" in data:
            changes["title"] = clean_str(data.get("title"), "title", errors, label="Task title")
        if "description" in data:
            changes["description"] = clean_str(data.get("description"), "description", errors, required=False) or ""
        if data.get("priority"):
            changes["priority"] = _clean_enum(TaskPriority, data["priority"], "priority", errors)
        if data.get("status"):
            changes["status"] = _clean_enum(TaskStatus, data["status"], "status", errors)
        if "dueDate" in data:
            changes["due_date"] = clean_date(data.get("dueDate"), "dueDate", errors, required=False)
        if "assigneeId" in data:
            changes["assignee_id"] = self._clean_assignee(data.get("assigneeId"), errors)
        errors.raise_if_any()

        updated = self._tasks.update(task.task_id, changes=changes)
        if updated is None:
            raise NotFoundError("Task not found")
        return updated

    def delete_task(self, principal: Principal, task_id: str) -> None:
        task = self._visible_task(principal, task_id)
        if not self._tasks.delete(task.task_id):
            raise NotFoundError("Task not found")
