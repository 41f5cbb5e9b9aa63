"""Skill domain data models."""

from __future__ import annotations

import datetime as dt
from typing import Annotated

import msgspec
from msgspec import Meta, Struct

from .utilities import skill_level

__all__ = (
    "SkillBulkXpRequest",
    "SkillBulkXpResponse",
    "SkillCreateRequest",
    "SkillResponse",
    "SkillUpdateRequest",
)

SkillXp = Annotated[int, Meta(ge=0, le=100_000)]


class SkillCreateRequest(Struct):
    """Payload for creating a skill.

    Attributes:
        name: Skill name, unique per user regardless of case.
        xp: Starting XP.
    """

    name: Annotated[str, Meta(min_length=2, max_length=50)]
    xp: SkillXp = 0


class SkillUpdateRequest(Struct):
    """Set the XP of a skill.

    Attributes:
        xp: New absolute XP value.
    """

    xp: SkillXp


class SkillResponse(Struct, rename="camel"):
    """Skill with its derived level.

    Attributes:
        id: Skill ID.
        name: Skill name.
        xp: Accumulated XP.
        created_by: Owner user ID.
        created_at: Creation timestamp.
        level: Derived level, floor(xp / 100).
        xp_added: XP added by a bulk update, when applicable.
    """

    id: int
    name: str
    xp: int
    created_by: int
    created_at: dt.datetime
    level: int = 0
    xp_added: int | None = None

    def __post_init__(self) -> None:
        """Derive the level from the skill XP."""
        self.level = skill_level(self.xp)


class SkillBulkXpRequest(Struct):
    """Add XP to several skills by name.

    Attributes:
        skill_xp_updates: XP to add per skill name.
    """

    skill_xp_updates: dict[str, SkillXp] = msgspec.field(name="skillXPUpdates")


class SkillBulkXpResponse(Struct):
    """Result of a bulk skill XP update.

    Attributes:
        updated: Skills that received XP.
        errors: Messages for names that could not be updated.
    """

    updated: list[SkillResponse]
    errors: list[str]
