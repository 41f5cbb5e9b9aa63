"""Error taxonomy shared by every domain.

Controllers map these bases onto HTTP status codes: validation and
already-completed errors are 400, forbidden is 403 and not found is 404.
"""

from __future__ import annotations

from utilities.errors import DomainError


class ValidationError(DomainError):
    """Input is well-formed but violates a business rule."""


class NotFoundError(DomainError):
    """A referenced entity does not exist."""


class ForbiddenError(DomainError):
    """The caller does not own the entity they tried to change."""


class AlreadyCompletedError(DomainError):
    """A completion was already recorded for the current period."""


class NotOwnerError(ForbiddenError):
    """Caller tried to change a resource created by someone else."""

    def __init__(self, resource: str, resource_id: int, user_id: int) -> None:
        super().__init__(
            f"Access denied. You can only modify your own {resource}s.",
            resource=resource,
            resource_id=resource_id,
            user_id=user_id,
        )
