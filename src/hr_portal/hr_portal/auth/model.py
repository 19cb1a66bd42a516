from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """Domain entity: an account that can sign in.

    Note: Plain data object (no DB access code).
    """

    user_id: str
    email: str
    name: str
    password_hash: str
    is_active: bool = True


@dataclass(frozen=True)
class Principal:
    """The authenticated user a request executes on behalf of."""

    user_id: str
    email: str
    name: str = ""

    def to_dict(self) -> dict:
        return {"id": self.user_id, "email": self.email, "name": self.name}
