"""Daily reset models: per-day quest completion status and day finishing."""

from __future__ import annotations

import datetime as dt
from typing import Annotated

import msgspec
from msgspec import Meta, Struct

from .utilities import MAX_DAILY_REWARD

__all__ = (
    "CompleteDailyQuestsRequest",
    "CompleteDailyQuestsResponse",
    "DailyQuestStatusResponse",
    "ToggleQuestRequest",
    "ToggleQuestResponse",
)


class DailyQuestStatusResponse(Struct, rename="camel"):
    """Daily quest status for the current reset period.

    Attributes:
        completed_quests: Quest IDs ticked off today.
        finished_today: Whether the day has been finished and rewards credited.
        last_reset_date: Reset key of the stored period.
        current_date: Reset key of the current period.
    """

    completed_quests: list[int]
    finished_today: bool
    last_reset_date: dt.date
    current_date: dt.date


class ToggleQuestRequest(Struct, rename="camel"):
    """Toggle a single daily quest for today.

    Attributes:
        quest_id: Quest to add to or remove from today's completed set.
    """

    quest_id: int


class ToggleQuestResponse(Struct, rename="camel"):
    """Result of toggling a daily quest.

    Attributes:
        completed_quests: Quest IDs ticked off today after the toggle.
        finished_today: Whether the day has been finished.
        quest_id: The toggled quest.
        is_completed: Whether the quest is now in today's completed set.
    """

    completed_quests: list[int]
    finished_today: bool
    quest_id: int
    is_completed: bool


class CompleteDailyQuestsRequest(Struct):
    """Finish the day and collect rewards for the selected quests.

    Attributes:
        completed_quest_ids: Quests completed today.
        total_xp: XP to credit.
        total_coins: Coins to credit.
        skill_xp_updates: XP to credit per skill name.
    """

    completed_quest_ids: list[int] = msgspec.field(name="completedQuestIds")
    total_xp: Annotated[int, Meta(gt=0, le=MAX_DAILY_REWARD)] = msgspec.field(name="totalXP")
    total_coins: Annotated[int, Meta(gt=0, le=MAX_DAILY_REWARD)] = msgspec.field(name="totalCoins")
    skill_xp_updates: dict[str, Annotated[int, Meta(ge=0, le=MAX_DAILY_REWARD)]] = msgspec.field(
        default_factory=dict, name="skillXPUpdates"
    )


class CompleteDailyQuestsResponse(Struct):
    """Result of finishing the day.

    Attributes:
        total_xp: User total XP after crediting.
        coins: User coin balance after crediting.
        skill_xp: XP per skill name after crediting.
        added_xp: XP credited by this call.
        added_coins: Coins credited by this call.
        skill_xp_updates: Per-skill XP credited by this call.
        completion_date: Reset key the completion was recorded under.
    """

    total_xp: int = msgspec.field(name="totalXP")
    coins: int = msgspec.field(name="coins")
    skill_xp: dict[str, int] = msgspec.field(name="skillXP")
    added_xp: int = msgspec.field(name="addedXP")
    added_coins: int = msgspec.field(name="addedCoins")
    skill_xp_updates: dict[str, int] = msgspec.field(name="skillXPUpdates")
    completion_date: dt.date = msgspec.field(name="completionDate")
