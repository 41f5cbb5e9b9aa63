"""Daily reward domain exceptions."""

from __future__ import annotations

from .common import NotFoundError, ValidationError


class DailyRewardNotFoundError(NotFoundError):
    """Daily reward does not exist."""

    def __init__(self, reward_id: int) -> None:
        super().__init__("Daily reward not found", reward_id=reward_id)


class RewardValidationError(ValidationError):
    """Daily reward fields violate a business rule."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
