"""Skill domain exceptions."""

from __future__ import annotations

from .common import NotFoundError, ValidationError


class SkillNotFoundError(NotFoundError):
    """Skill does not exist."""

    def __init__(self, skill_id: int) -> None:
        super().__init__("Skill not found", skill_id=skill_id)


class DuplicateSkillError(ValidationError):
    """Owner already has a skill with the name, ignoring case."""

    def __init__(self, name: str) -> None:
        super().__init__("You already have a skill with this name", name=name)


class SkillValidationError(ValidationError):
    """Skill fields violate a business rule."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
