"""User profile data models."""

from __future__ import annotations

import datetime as dt
from typing import Annotated, Literal

import msgspec
from msgspec import Meta, Struct

from .utilities import MAX_BALANCE, user_rank

__all__ = (
    "TITLE_SOURCES",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "ProfileUpdateResponse",
    "QuestStat",
    "QuestStats",
    "TitleDeleteResponse",
    "TitleResponse",
    "TitleSource",
)

TitleSource = Literal["daily_quest", "dungeon_quest", "level_achievement"]
TITLE_SOURCES: tuple[TitleSource, ...] = ("daily_quest", "dungeon_quest", "level_achievement")


class TitleResponse(Struct, rename="camel"):
    """Title held by a user.

    Attributes:
        name: Title name, unique per user.
        source: What granted the title.
        awarded_at: When the title was granted.
    """

    name: str
    source: TitleSource
    awarded_at: dt.datetime


class QuestStat(Struct):
    """Quest totals for one quest kind.

    Attributes:
        total: Quests the user created.
        completed: Completions the user has recorded.
    """

    total: int
    completed: int


class QuestStats(Struct, rename="camel"):
    """Quest totals per quest kind."""

    daily_quests: QuestStat
    dungeon_quests: QuestStat
    penalty_quests: QuestStat


class ProfileResponse(Struct, rename="camel"):
    """Aggregated user profile.

    Attributes:
        name: Username.
        xp: Total XP.
        coins: Coin balance.
        level: Derived hunter level, floor(xp / 250).
        achievements: Achievement titles derived from progress.
        titles: Titles earned from quests.
        skill_xp: XP per skill name.
        quest_stats: Quest totals per quest kind.
    """

    name: str
    xp: int
    coins: int
    achievements: list[str]
    titles: list[TitleResponse]
    skill_xp: dict[str, int] = msgspec.field(name="skillXP")
    quest_stats: QuestStats = msgspec.field(name="questStats")
    level: int = 0

    def __post_init__(self) -> None:
        """Derive the hunter level from total XP."""
        self.level = user_rank(self.xp)


class ProfileUpdateRequest(Struct, rename="camel"):
    """Editor-mode override of profile totals.

    Attributes:
        total_xp: New absolute total XP.
        coins: New absolute coin balance.
    """

    total_xp: Annotated[int, Meta(ge=0, le=MAX_BALANCE)] | None = None
    coins: Annotated[int, Meta(ge=0, le=MAX_BALANCE)] | None = None


class ProfileUpdateResponse(Struct, rename="camel"):
    """Profile totals after an editor-mode override."""

    total_xp: int
    coins: int


class TitleDeleteResponse(Struct, rename="camel"):
    """Result of removing a title."""

    deleted_title: str
    remaining_titles: list[TitleResponse]
