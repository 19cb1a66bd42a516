from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import session

from ..core.exceptions import UnauthorizedError
from .model import Principal

_SESSION_KEYS = ("user_id", "email", "name")


def store_principal(principal: Principal) -> None:
    session["user_id"] = principal.user_id
    session["email"] = principal.email
    session["name"] = principal.name


def clear_principal() -> None:
    for key in _SESSION_KEYS:
        session.pop(key, None)


def optional_principal() -> Optional[Principal]:
    user_id = session.get("user_id")
    if not user_id:
        return None
    return Principal(user_id=str(user_id), email=session.get("email", ""), name=session.get("name", ""))


def current_principal() -> Principal:
    """Principal of the current request; only the HTTP layer reads the session."""

    principal = optional_principal()
    if principal is None:
        raise UnauthorizedError("Unauthorized")
    return principal


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_principal()
        return view(*args, **kwargs)

    return wrapper
