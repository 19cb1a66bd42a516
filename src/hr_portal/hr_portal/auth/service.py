from __future__ import annotations

import logging

from werkzeug.security import check_password_hash

from ..common.validators import FieldErrors, clean_str
from ..core.exceptions import AuthenticationError
from .model import Principal
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> Principal:
        errors = FieldErrors()
        email = clean_str(email, "email", errors)
        if not isinstance(password, str) or not password:
            errors.add("password", "password is required")
        errors.raise_if_any()

        user = self._users.get_by_email(email.lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Failed login for %s", user.email)
            raise AuthenticationError("Invalid email or password")

        return Principal(user_id=user.user_id, email=user.email, name=user.name)
