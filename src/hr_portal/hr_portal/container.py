from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .assistant.client import GeminiClient
from .assistant.service import AssistantService
from .auth.mysql_user_repository import MySQLUserRepository
from .auth.service import AuthService
from .core.constants import DEFAULT_ASSISTANT_TIMEOUT
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.service import ProjectService
from .salaries.mysql_salary_repository import MySQLSalaryRepository
from .salaries.service import SalaryService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.service import TaskService


@dataclass(frozen=True)
class AssistantSettings:
    api_key: str = ""
    model: str = "gemini-2.0-flash"
    timeout: float = DEFAULT_ASSISTANT_TIMEOUT
    system_prompt: str = "You are an HR assistant. Keep answers professional, concise and HR-related."


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    auth_service: AuthService
    employee_service: EmployeeService
    salary_service: SalaryService
    project_service: ProjectService
    task_service: TaskService
    assistant_service: AssistantService


def build_container(*, db_config: dict, assistant: Optional[AssistantSettings] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))
    assistant = assistant or AssistantSettings()

    users_repo = MySQLUserRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    salaries_repo = MySQLSalaryRepository(conn)
    projects_repo = MySQLProjectRepository(conn)
    tasks_repo = MySQLTaskRepository(conn)

    project_service = ProjectService(projects_repo, users_repo)

    return Container(
        conn=conn,
        auth_service=AuthService(users_repo),
        employee_service=EmployeeService(employees_repo, salaries_repo, tasks_repo),
        salary_service=SalaryService(salaries_repo, employees_repo),
        project_service=project_service,
        task_service=TaskService(tasks_repo, project_service, employees_repo),
        assistant_service=AssistantService(
            GeminiClient(api_key=assistant.api_key, model=assistant.model, timeout=assistant.timeout),
            system_prompt=assistant.system_prompt,
        ),
    )
