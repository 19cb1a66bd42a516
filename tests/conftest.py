from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.hr_portal.hr_portal.assistant.service import AssistantService
from src.hr_portal.hr_portal.auth.model import Principal, User
from src.hr_portal.hr_portal.auth.service import AuthService
from src.hr_portal.hr_portal.container import Container
from src.hr_portal.hr_portal.core.exceptions import ConflictError
from src.hr_portal.hr_portal.employees.model import Employee, EmployeeInput
from src.hr_portal.hr_portal.employees.service import EmployeeService
from src.hr_portal.hr_portal.main import create_app
from src.hr_portal.hr_portal.projects.model import ManagerRef, Project, ProjectInput
from src.hr_portal.hr_portal.projects.service import ProjectService
from src.hr_portal.hr_portal.salaries.model import DUPLICATE_PERIOD_MESSAGE, EmployeeRef, SalaryRecord
from src.hr_portal.hr_portal.salaries.service import SalaryService
from src.hr_portal.hr_portal.tasks.model import NewTask, Task
from src.hr_portal.hr_portal.tasks.service import TaskService

_BASE_TIME = datetime(2025, 1, 1, 9, 0, 0)


class _Clock:
    """Monotonic fake timestamps so "newest first" ordering is deterministic."""

    def __init__(self):
        self._ticks = itertools.count()

    def now(self) -> datetime:
        return _BASE_TIME + timedelta(seconds=next(self._ticks))


class InMemoryUsers:
    def __init__(self, users: list[User] = ()):
        self._by_id = {u.user_id: u for u in users}

    def add(self, user: User) -> User:
        self._by_id[user.user_id] = user
        return user

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.email == email), None)

    def existing_ids(self, user_ids: list[str]) -> set[str]:
        return {uid for uid in user_ids if uid in self._by_id}


class InMemoryEmployees:
    def __init__(self, clock: _Clock):
        self._clock = clock
        self._by_id: dict[str, Employee] = {}
        self._ids = itertools.count(1)

    def add(self, employee_id: str, *, name: str = "Employee", code: Optional[str] = None, owner_id: str = "u1") -> Employee:
        employee = Employee(
            employee_id=employee_id,
            employee_code=code or employee_id,
            name=name,
            email=None,
            position=None,
            joining_date=date(2024, 1, 1),
            basic_salary=Decimal("1000"),
            is_active=True,
            owner_id=owner_id,
            created_at=self._clock.now(),
        )
        self._by_id[employee_id] = employee
        return employee

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        return next((e for e in self._by_id.values() if e.employee_code == employee_code), None)

    def create(self, *, owner_id: str, data: EmployeeInput) -> Employee:
        employee_id = f"emp{next(self._ids)}"
        now = self._clock.now()
        employee = Employee(employee_id=employee_id, owner_id=owner_id, created_at=now, updated_at=now, **vars(data))
        self._by_id[employee_id] = employee
        return employee

    def update(self, employee_id: str, *, data: EmployeeInput) -> Optional[Employee]:
        current = self._by_id.get(employee_id)
        if current is None:
            return None
        updated = replace(current, updated_at=self._clock.now(), **vars(data))
        self._by_id[employee_id] = updated
        return updated

    def delete(self, employee_id: str) -> bool:
        return self._by_id.pop(employee_id, None) is not None

    def list_for_owner(self, owner_id: str):
        items = [e for e in self._by_id.values() if e.owner_id == owner_id]
        return sorted(items, key=lambda e: e.created_at, reverse=True)


class InMemorySalaries:
    """Mirrors the MySQL table, including the UNIQUE (employee_id, month, year) key."""

    def __init__(self, employees: InMemoryEmployees, clock: _Clock):
        self._employees = employees
        self._clock = clock
        self._by_id: dict[str, SalaryRecord] = {}
        self._ids = itertools.count(1)
        self.writes = 0

    def _with_ref(self, record: SalaryRecord) -> SalaryRecord:
        e = self._employees.get_by_id(record.employee_id)
        ref = EmployeeRef(employee_id=e.employee_id, name=e.name, employee_code=e.employee_code) if e else None
        return replace(record, employee=ref)

    def _check_unique(self, period, exclude_id=None) -> None:
        for r in self._by_id.values():
            if r.period == period and r.record_id != exclude_id:
                raise ConflictError(DUPLICATE_PERIOD_MESSAGE)

    def create(self, *, employee_id, month, year, basic_salary, bonus, deductions, net_salary) -> SalaryRecord:
        self._check_unique((employee_id, month, year))
        now = self._clock.now()
        record = SalaryRecord(
            record_id=f"sal{next(self._ids)}",
            employee_id=employee_id,
            month=month,
            year=year,
            basic_salary=basic_salary,
            bonus=bonus,
            deductions=deductions,
            net_salary=net_salary,
            created_at=now,
            updated_at=now,
        )
        self._by_id[record.record_id] = record
        self.writes += 1
        return self._with_ref(record)

    def get_by_id(self, record_id: str) -> Optional[SalaryRecord]:
        record = self._by_id.get(record_id)
        return self._with_ref(record) if record else None

    def _matching(self, employee_id=None, month=None, year=None):
        return [
            r
            for r in self._by_id.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (month is None or r.month == month)
            and (year is None or r.year == year)
        ]

    def find_by_period(self, *, employee_id, month, year, exclude_id=None) -> Optional[SalaryRecord]:
        for r in self._matching(employee_id, month, year):
            if r.record_id != exclude_id:
                return self._with_ref(r)
        return None

    def list(self, *, employee_id=None, month=None, year=None, limit=10, offset=0):
        items = sorted(
            self._matching(employee_id, month, year),
            key=lambda r: (r.year, r.month, r.created_at),
            reverse=True,
        )
        return [self._with_ref(r) for r in items[offset : offset + limit]]

    def count(self, *, employee_id=None, month=None, year=None) -> int:
        return len(self._matching(employee_id, month, year))

    def update(self, record_id: str, *, changes: dict) -> Optional[SalaryRecord]:
        current = self._by_id.get(record_id)
        if current is None:
            return None
        updated = replace(current, updated_at=self._clock.now(), **changes)
        self._check_unique(updated.period, exclude_id=record_id)
        self._by_id[record_id] = updated
        self.writes += 1
        return self._with_ref(updated)

    def delete(self, record_id: str) -> bool:
        return self._by_id.pop(record_id, None) is not None


class InMemoryProjects:
    def __init__(self, users: InMemoryUsers, clock: _Clock):
        self._users = users
        self._clock = clock
        self._by_id: dict[str, Project] = {}
        self._ids = itertools.count(1)

    def _with_manager(self, project: Project) -> Project:
        u = self._users.get_by_id(project.manager_id)
        return replace(project, manager=ManagerRef(user_id=u.user_id, name=u.name, email=u.email) if u else None)

    def create(self, data: ProjectInput) -> Project:
        now = self._clock.now()
        project = Project(project_id=f"prj{next(self._ids)}", created_at=now, updated_at=now, **vars(data))
        self._by_id[project.project_id] = project
        return self._with_manager(project)

    def get_by_id(self, project_id: str) -> Optional[Project]:
        project = self._by_id.get(project_id)
        return self._with_manager(project) if project else None

    def _visible(self, user_id: str):
        items = [p for p in self._by_id.values() if p.can_view(user_id)]
        return sorted(items, key=lambda p: p.created_at, reverse=True)

    def list_visible(self, user_id: str, *, limit: int, offset: int):
        return [self._with_manager(p) for p in self._visible(user_id)[offset : offset + limit]]

    def count_visible(self, user_id: str) -> int:
        return len(self._visible(user_id))

    def update(self, project_id: str, *, changes: dict, team_members=None) -> Optional[Project]:
        current = self._by_id.get(project_id)
        if current is None:
            return None
        if team_members is not None:
            changes = dict(changes, team_members=tuple(team_members))
        updated = replace(current, updated_at=self._clock.now(), **changes)
        self._by_id[project_id] = updated
        return self._with_manager(updated)

    def delete(self, project_id: str) -> bool:
        return self._by_id.pop(project_id, None) is not None


class InMemoryTasks:
    def __init__(self, clock: _Clock):
        self._clock = clock
        self._by_id: dict[str, Task] = {}
        self._ids = itertools.count(1)

    def create(self, *, project_id: str, data: NewTask) -> Task:
        now = self._clock.now()
        task = Task(task_id=f"tsk{next(self._ids)}", project_id=project_id, created_at=now, updated_at=now, **vars(data))
        self._by_id[task.task_id] = task
        return task

    def get_by_id(self, task_id: str) -> Optional[Task]:
        return self._by_id.get(task_id)

    def list(self, *, project_id=None, assignee_id=None, status=None):
        return [
            t
            for t in self._by_id.values()
            if (project_id is None or t.project_id == project_id)
            and (assignee_id is None or t.assignee_id == assignee_id)
            and (status is None or t.status == status)
        ]

    def update(self, task_id: str, *, changes: dict) -> Optional[Task]:
        current = self._by_id.get(task_id)
        if current is None:
            return None
        updated = replace(current, updated_at=self._clock.now(), **changes)
        self._by_id[task_id] = updated
        return updated

    def delete(self, task_id: str) -> bool:
        return self._by_id.pop(task_id, None) is not None


@pytest.fixture
def clock():
    return _Clock()


@pytest.fixture
def users_repo():
    return InMemoryUsers(
        [
            User(user_id="u1", email="alice@example.com", name="Alice", password_hash=generate_password_hash("secret1")),
            User(user_id="u2", email="bob@example.com", name="Bob", password_hash=generate_password_hash("secret2")),
            User(user_id="u3", email="carol@example.com", name="Carol", password_hash=generate_password_hash("secret3")),
        ]
    )


@pytest.fixture
def employees_repo(clock):
    return InMemoryEmployees(clock)


@pytest.fixture
def salaries_repo(employees_repo, clock):
    return InMemorySalaries(employees_repo, clock)


@pytest.fixture
def projects_repo(users_repo, clock):
    return InMemoryProjects(users_repo, clock)


@pytest.fixture
def tasks_repo(clock):
    return InMemoryTasks(clock)


@pytest.fixture
def alice():
    return Principal(user_id="u1", email="alice@example.com", name="Alice")


@pytest.fixture
def bob():
    return Principal(user_id="u2", email="bob@example.com", name="Bob")


@pytest.fixture
def carol():
    return Principal(user_id="u3", email="carol@example.com", name="Carol")


class CannedGenerator:
    """Stands in for the hosted text model."""

    def __init__(self):
        self.calls = []

    def generate(self, *, system_prompt, prompt):
        self.calls.append((system_prompt, prompt))
        return f"echo: {prompt}"


@pytest.fixture
def generator():
    return CannedGenerator()


@pytest.fixture
def app(monkeypatch, users_repo, employees_repo, salaries_repo, projects_repo, tasks_repo, generator):
    monkeypatch.setenv("APP_ENV", "testing")
    employees_repo.add("E1", name="Ann Lee", code="EMP-001", owner_id="u1")
    project_service = ProjectService(projects_repo, users_repo)
    container = Container(
        conn=None,
        auth_service=AuthService(users_repo),
        employee_service=EmployeeService(employees_repo, salaries_repo, tasks_repo),
        salary_service=SalaryService(salaries_repo, employees_repo),
        project_service=project_service,
        task_service=TaskService(tasks_repo, project_service, employees_repo),
        assistant_service=AssistantService(generator, system_prompt="HR only"),
    )
    return create_app(container=container)


@pytest.fixture
def client(app):
    """Test client with Alice already signed in."""

    c = app.test_client()
    with c.session_transaction() as sess:
        sess["user_id"] = "u1"
        sess["email"] = "alice@example.com"
        sess["name"] = "Alice"
    return c
