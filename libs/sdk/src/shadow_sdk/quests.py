"""Quest domain data models."""

from __future__ import annotations

import datetime as dt
from typing import Annotated

import msgspec
from msgspec import Meta, Struct

from .utilities import skill_level

__all__ = (
    "CleanupResponse",
    "DailyQuestCreateRequest",
    "DailyQuestResponse",
    "DailyQuestUpdateRequest",
    "DungeonCompletionResponse",
    "DungeonQuestCreateRequest",
    "DungeonQuestResponse",
    "DungeonQuestUpdateRequest",
    "PenaltyAcceptResponse",
    "PenaltyQuestCreateRequest",
    "PenaltyQuestResponse",
    "PenaltyQuestUpdateRequest",
    "QuestName",
    "QuestReward",
    "SkillName",
    "SkillProgress",
    "TitleName",
    "UpdatedProfile",
)

QuestName = Annotated[str, Meta(min_length=3, max_length=100)]
QuestReward = Annotated[int, Meta(ge=1, le=10_000)]
SkillName = Annotated[str, Meta(min_length=1, max_length=50)]
TitleName = Annotated[str, Meta(min_length=1, max_length=100)]


class DailyQuestCreateRequest(Struct):
    """Payload for creating a daily quest.

    Attributes:
        name: Quest name.
        xp: XP awarded on completion.
        coins: Coins awarded on completion.
        skill: Name of the skill the XP counts towards.
    """

    name: QuestName
    xp: QuestReward
    coins: QuestReward
    skill: SkillName


class DailyQuestUpdateRequest(Struct):
    """Partial update of a daily quest. Unset fields are left unchanged."""

    name: QuestName | None = None
    xp: QuestReward | None = None
    coins: QuestReward | None = None
    skill: SkillName | None = None


class DailyQuestResponse(Struct, rename="camel"):
    """Daily quest as seen by the requesting user.

    Attributes:
        id: Quest ID.
        name: Quest name.
        xp: XP awarded on completion.
        coins: Coins awarded on completion.
        skill: Skill the XP counts towards.
        created_by: Owner user ID.
        created_at: Creation timestamp.
        is_completed: Whether the requesting user ticked this quest off today.
    """

    id: int
    name: str
    xp: int
    coins: int
    skill: str
    created_by: int
    created_at: dt.datetime
    is_completed: bool = False


class DungeonQuestCreateRequest(Struct):
    """Payload for creating a dungeon quest.

    Attributes:
        name: Quest name.
        xp: XP awarded on completion.
        coins: Coins awarded on completion.
        skill: Skill the XP counts towards.
        title: Title granted on completion.
    """

    name: QuestName
    xp: QuestReward
    coins: QuestReward
    skill: SkillName
    title: TitleName


class DungeonQuestUpdateRequest(Struct):
    """Partial update of a dungeon quest. Unset fields are left unchanged."""

    name: QuestName | None = None
    xp: QuestReward | None = None
    coins: QuestReward | None = None
    skill: SkillName | None = None
    title: TitleName | None = None


class DungeonQuestResponse(Struct, rename="camel"):
    """Dungeon quest as seen by the requesting user.

    Attributes:
        is_completed: Whether the requesting user has cleared this dungeon.
    """

    id: int
    name: str
    xp: int
    coins: int
    skill: str
    title: str
    created_by: int
    created_at: dt.datetime
    is_completed: bool = False


class PenaltyQuestCreateRequest(Struct):
    """Payload for creating a penalty quest.

    Attributes:
        name: Quest name.
        xp: XP awarded on completion.
        skill: Skill the XP counts towards, if the user has it.
    """

    name: QuestName
    xp: QuestReward
    skill: SkillName


class PenaltyQuestUpdateRequest(Struct):
    """Partial update of a penalty quest. Unset fields are left unchanged."""

    name: QuestName | None = None
    xp: QuestReward | None = None
    skill: SkillName | None = None


class PenaltyQuestResponse(Struct, rename="camel"):
    """Penalty quest with the requesting user's completion state for today.

    Attributes:
        is_completed_today: Whether the user completed it in the current reset period.
        last_completed_at: When today's completion happened.
    """

    id: int
    name: str
    xp: int
    skill: str
    created_by: int
    created_at: dt.datetime
    is_completed_today: bool = False
    last_completed_at: dt.datetime | None = None


class SkillProgress(Struct, rename="camel"):
    """Skill state after a reward was credited.

    Attributes:
        skill: Skill name.
        new_xp: Skill XP after crediting.
        level: Derived skill level.
    """

    skill: str
    new_xp: int
    level: int = 0

    def __post_init__(self) -> None:
        """Derive the level from the skill XP."""
        self.level = skill_level(self.new_xp)


class UpdatedProfile(Struct, rename="camel"):
    """User profile changes after clearing a dungeon.

    Attributes:
        total_xp: User total XP after crediting.
        coins: User coins after crediting.
        new_title: Title carried by the dungeon.
        title_awarded: False when the user already held the title.
        skill_progress: Skill state after crediting.
    """

    total_xp: int
    coins: int
    new_title: str
    title_awarded: bool
    skill_progress: SkillProgress


class DungeonCompletionResponse(Struct, rename="camel"):
    """Result of clearing a dungeon quest."""

    quest: DungeonQuestResponse
    updated_profile: UpdatedProfile


class PenaltyAcceptResponse(Struct):
    """Result of completing a penalty quest.

    Attributes:
        quest: The completed quest.
        xp_awarded: XP credited.
        total_xp: User total XP after crediting.
        level: Derived user level.
        completed_today: Always true on success.
        next_available: When the quest can be completed again.
        skill_updated: Whether a matching skill received the XP.
    """

    quest: PenaltyQuestResponse
    xp_awarded: int = msgspec.field(name="xpAwarded")
    total_xp: int = msgspec.field(name="totalXP")
    level: int = msgspec.field(name="level")
    completed_today: bool = msgspec.field(name="completedToday")
    next_available: dt.datetime = msgspec.field(name="nextAvailable")
    skill_updated: bool = msgspec.field(name="skillUpdated")


class CleanupResponse(Struct, rename="camel"):
    """Result of pruning old penalty completions.

    Attributes:
        deleted_count: Number of ledger rows removed.
    """

    deleted_count: int
