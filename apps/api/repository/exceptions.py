"""Repository-layer exceptions.

Repositories raise these when a statement trips a database constraint. Services
catch them and translate them to domain exceptions.
"""

from __future__ import annotations

import asyncpg


class RepositoryError(Exception):
    """Base exception for repository layer errors."""

    def __init__(self, message: str, **context: object) -> None:
        """Initialize repository error.

        Args:
            message: Human-readable error message.
            **context: Additional context about the error.
        """
        self.message = message
        self.context = context
        super().__init__(message)


class ConstraintViolationError(RepositoryError):
    """A named database constraint rejected a write."""

    kind = "integrity"

    def __init__(self, constraint_name: str, table: str, detail: str | None = None) -> None:
        """Initialize constraint violation.

        Args:
            constraint_name: Name of the violated constraint or index.
            table: Table the statement targeted.
            detail: Optional detail from the database error.
        """
        super().__init__(
            f"{self.kind.capitalize()} constraint '{constraint_name}' violated on table '{table}'",
            constraint_name=constraint_name,
            table=table,
            detail=detail,
        )
        self.constraint_name = constraint_name
        self.table = table
        self.detail = detail


class UniqueConstraintViolationError(ConstraintViolationError):
    """Database unique constraint was violated."""

    kind = "unique"


class ForeignKeyViolationError(ConstraintViolationError):
    """Database foreign key constraint was violated."""

    kind = "foreign key"


class CheckConstraintViolationError(ConstraintViolationError):
    """Database check constraint was violated."""

    kind = "check"


class NumericOutOfRangeError(RepositoryError):
    """A numeric value does not fit its column."""

    def __init__(self, table: str, detail: str | None = None) -> None:
        """Initialize out-of-range error.

        Args:
            table: Table the statement targeted.
            detail: Optional detail from the database error.
        """
        super().__init__(f"Numeric value out of range on table '{table}'", table=table, detail=detail)
        self.table = table
        self.detail = detail


def extract_constraint_name(error: Exception) -> str | None:
    """Extract constraint name from asyncpg error.

    Args:
        error: The asyncpg exception.

    Returns:
        Constraint name if found, None otherwise.
    """
    return getattr(error, "constraint_name", None)


def translate_integrity_error(error: asyncpg.IntegrityConstraintViolationError, table: str) -> RepositoryError:
    """Map an asyncpg integrity error onto the matching repository exception.

    Args:
        error: Error raised by asyncpg.
        table: Table the failing statement targeted.

    Returns:
        The repository exception to raise in its place.
    """
    constraint = extract_constraint_name(error) or "unknown"
    detail = getattr(error, "detail", None) or str(error)
    if isinstance(error, asyncpg.UniqueViolationError):
        return UniqueConstraintViolationError(constraint, table, detail)
    if isinstance(error, asyncpg.ForeignKeyViolationError):
        return ForeignKeyViolationError(constraint, table, detail)
    if isinstance(error, asyncpg.CheckViolationError):
        return CheckConstraintViolationError(constraint, table, detail)
    return RepositoryError(str(error), table=table, constraint_name=constraint)


def translate_data_error(error: asyncpg.DataError, table: str) -> NumericOutOfRangeError:
    """Map an asyncpg data error from a numeric write onto ``NumericOutOfRangeError``.

    Covers values rejected while binding parameters and arithmetic that
    overflows a column inside the statement.

    Args:
        error: Error raised by asyncpg.
        table: Table the failing statement targeted.

    Returns:
        The repository exception to raise in its place.
    """
    return NumericOutOfRangeError(table, str(error))
