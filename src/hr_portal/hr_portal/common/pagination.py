from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, Optional, Sequence, TypeVar

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .validators import FieldErrors

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> dict:
        return {
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages,
        }


def _as_int(value: Any, field_name: str, errors: FieldErrors) -> Optional[int]:
    if isinstance(value, bool):
        errors.add(field_name, f"{field_name} must be an integer")
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        errors.add(field_name, f"{field_name} must be an integer")
        return None


def page_request(page: Any = None, limit: Any = None, *, default_limit: int = DEFAULT_PAGE_SIZE) -> PageRequest:
    """Normalize paging input: page >= 1, limit clamped to [1, MAX_PAGE_SIZE]."""

    errors = FieldErrors()
    p = DEFAULT_PAGE if page in (None, "") else _as_int(page, "page", errors)
    n = default_limit if limit in (None, "") else _as_int(limit, "limit", errors)
    errors.raise_if_any("Invalid pagination parameters")

    return PageRequest(page=max(DEFAULT_PAGE, p), limit=min(MAX_PAGE_SIZE, max(1, n)))
