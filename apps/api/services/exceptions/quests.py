"""Quest domain exceptions.

Raised by QuestsService and DailyResetService and caught by controllers.
"""

from __future__ import annotations

import datetime as dt

from .common import AlreadyCompletedError, ForbiddenError, NotFoundError, ValidationError

_KIND_LABELS = {"daily": "Daily quest", "dungeon": "Dungeon quest", "penalty": "Penalty quest"}


class QuestNotFoundError(NotFoundError):
    """Quest does not exist."""

    def __init__(self, kind: str, quest_id: int) -> None:
        super().__init__(f"{_KIND_LABELS.get(kind, 'Quest')} not found", kind=kind, quest_id=quest_id)


class NotQuestOwnerError(ForbiddenError):
    """Caller does not own the quest."""

    def __init__(self, quest_id: int, user_id: int) -> None:
        super().__init__(
            "Access denied. You can only modify your own quests.",
            quest_id=quest_id,
            user_id=user_id,
        )


class QuestValidationError(ValidationError):
    """Quest fields violate a business rule that the schema cannot express."""

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message, **context)


class NoQuestsSelectedError(ValidationError):
    """Day was finished with an empty quest selection."""

    def __init__(self) -> None:
        super().__init__("No completed quests provided")


class AlreadyFinishedError(AlreadyCompletedError):
    """Daily quests were already finished for the current period."""

    def __init__(self, reset_date: dt.date) -> None:
        super().__init__("Daily quests already completed for today", reset_date=reset_date.isoformat())


class AlreadyCompletedTodayError(AlreadyCompletedError):
    """Penalty quest was already completed in the current period."""

    def __init__(self, quest_id: int, reset_date: dt.date) -> None:
        super().__init__(
            "You have already completed this quest today. It will be available again tomorrow at 12:00 AM.",
            quest_id=quest_id,
            reset_date=reset_date.isoformat(),
        )


class DungeonAlreadyCompletedError(AlreadyCompletedError):
    """User already cleared the dungeon quest."""

    def __init__(self, quest_id: int) -> None:
        super().__init__("Quest is already completed", quest_id=quest_id)
