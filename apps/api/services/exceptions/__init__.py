"""Service-layer domain exceptions."""

from .auth import (  # noqa: I001
    AuthError,
    InvalidCredentialsError,
    PasswordValidationError,
    UsernameTakenError,
    UsernameValidationError,
)
from .common import (
    AlreadyCompletedError,
    ForbiddenError,
    NotFoundError,
    NotOwnerError,
    ValidationError,
)
from .quests import (
    AlreadyCompletedTodayError,
    AlreadyFinishedError,
    DungeonAlreadyCompletedError,
    NoQuestsSelectedError,
    NotQuestOwnerError,
    QuestNotFoundError,
    QuestValidationError,
)
from .rewards import DailyRewardNotFoundError, RewardValidationError
from .shop import ShopItemNotFoundError, ShopValidationError
from .skills import DuplicateSkillError, SkillNotFoundError, SkillValidationError
from .users import (
    EmptyProfileUpdateError,
    InsufficientCoinsError,
    InventoryItemNotFoundError,
    ItemAlreadyUsedError,
    NegativeTotalsError,
    TitleNotFoundError,
    TotalsOutOfRangeError,
    UserNotFoundError,
)

__all__ = [
    "AlreadyCompletedError",
    "AlreadyCompletedTodayError",
    "AlreadyFinishedError",
    "AuthError",
    "DailyRewardNotFoundError",
    "DuplicateSkillError",
    "DungeonAlreadyCompletedError",
    "EmptyProfileUpdateError",
    "ForbiddenError",
    "InsufficientCoinsError",
    "InvalidCredentialsError",
    "InventoryItemNotFoundError",
    "ItemAlreadyUsedError",
    "NegativeTotalsError",
    "NoQuestsSelectedError",
    "NotFoundError",
    "NotOwnerError",
    "NotQuestOwnerError",
    "PasswordValidationError",
    "QuestNotFoundError",
    "QuestValidationError",
    "RewardValidationError",
    "ShopItemNotFoundError",
    "ShopValidationError",
    "SkillNotFoundError",
    "SkillValidationError",
    "TitleNotFoundError",
    "TotalsOutOfRangeError",
    "UserNotFoundError",
    "UsernameTakenError",
    "UsernameValidationError",
    "ValidationError",
]
