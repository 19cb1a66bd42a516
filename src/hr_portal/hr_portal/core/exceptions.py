from __future__ import annotations

from typing import Mapping, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400

    def __init__(self, message: str, *, details: Optional[Mapping[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details) if details else None


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``details`` maps every failing field to its message.
    """

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class UnauthorizedError(AuthenticationError):
    """Raised when a request carries no authenticated principal."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist (or is not visible)."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when a write would break a uniqueness or referential rule."""

    status_code = 409


class UpstreamError(DomainError):
    """Raised when the hosted generative-text API fails."""

    status_code = 502


class StoreError(DomainError):
    """Raised when the datastore is unavailable or a query fails."""

    status_code = 500
