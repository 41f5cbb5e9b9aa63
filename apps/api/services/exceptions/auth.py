"""Authentication domain exceptions.

These exceptions represent business rule violations in the auth domain.
They are raised by AuthService and caught by controllers.
"""

from __future__ import annotations

from utilities.errors import DomainError

from .common import ValidationError


class AuthError(DomainError):
    """Base for authentication errors. Maps to 401."""


class InvalidCredentialsError(AuthError):
    """User provided an unknown username or a wrong password."""

    def __init__(self, username: str | None = None) -> None:
        super().__init__("Invalid username or password.", username=username)


class UsernameValidationError(ValidationError):
    """Username does not meet length requirements."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class PasswordValidationError(ValidationError):
    """Password does not meet length requirements."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class UsernameTakenError(ValidationError):
    """Username is already registered, ignoring case."""

    def __init__(self, username: str) -> None:
        super().__init__("Username is already taken.", username=username)
