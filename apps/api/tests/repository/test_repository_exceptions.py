import asyncpg
import pytest

from repository.exceptions import (
    CheckConstraintViolationError,
    ForeignKeyViolationError,
    RepositoryError,
    UniqueConstraintViolationError,
    translate_integrity_error,
)


class MockUniqueViolation(asyncpg.exceptions.UniqueViolationError):
    """Mock UniqueViolationError for testing."""

    def __init__(self, constraint_name: str, detail: str | None = None) -> None:
        self.constraint_name = constraint_name
        self.detail = detail
        super().__init__(f'duplicate key value violates unique constraint "{constraint_name}"')


class MockForeignKeyViolation(asyncpg.exceptions.ForeignKeyViolationError):
    """Mock ForeignKeyViolationError for testing."""

    def __init__(self, constraint_name: str, detail: str | None = None) -> None:
        self.constraint_name = constraint_name
        self.detail = detail
        super().__init__(f'insert or update on table violates foreign key constraint "{constraint_name}"')


class MockCheckViolation(asyncpg.exceptions.CheckViolationError):
    """Mock CheckViolationError for testing."""

    def __init__(self, constraint_name: str) -> None:
        self.constraint_name = constraint_name
        self.detail = None
        super().__init__(f'new row violates check constraint "{constraint_name}"')


class MockNotNullViolation(asyncpg.exceptions.NotNullViolationError):
    """Mock NotNullViolationError for testing."""

    def __init__(self) -> None:
        self.constraint_name = None
        self.detail = None
        super().__init__("null value in column violates not-null constraint")


def test_unique_violation() -> None:
    err = translate_integrity_error(
        MockUniqueViolation("unique_skill_per_user", "Key (created_by, lower(name))=(7, fitness) already exists."),
        "skills.skills",
    )

    assert isinstance(err, UniqueConstraintViolationError)
    assert err.constraint_name == "unique_skill_per_user"
    assert err.table == "skills.skills"
    assert "already exists" in err.detail


def test_foreign_key_violation() -> None:
    err = translate_integrity_error(MockForeignKeyViolation("daily_status_user_id_fkey"), "quests.daily_status")

    assert isinstance(err, ForeignKeyViolationError)
    assert err.constraint_name == "daily_status_user_id_fkey"


def test_check_violation() -> None:
    err = translate_integrity_error(MockCheckViolation("users_coins_check"), "core.users")

    assert isinstance(err, CheckConstraintViolationError)
    assert "check constraint 'users_coins_check'" in err.message.lower()


def test_other_integrity_error_is_generic() -> None:
    err = translate_integrity_error(MockNotNullViolation(), "shop.items")

    assert type(err) is RepositoryError
    assert err.context["constraint_name"] == "unknown"


@pytest.mark.parametrize(
    ("exc_type", "kind"),
    [
        (UniqueConstraintViolationError, "unique"),
        (ForeignKeyViolationError, "foreign key"),
        (CheckConstraintViolationError, "check"),
    ],
)
def test_message_names_kind(exc_type, kind) -> None:
    err = exc_type("some_constraint", "core.users")

    assert err.message.lower().startswith(kind)
