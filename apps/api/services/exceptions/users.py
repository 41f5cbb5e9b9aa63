"""User profile, shop purchase and inventory exceptions."""

from __future__ import annotations

from .common import NotFoundError, ValidationError


class UserNotFoundError(NotFoundError):
    """User does not exist."""

    def __init__(self, user_id: int) -> None:
        super().__init__("User not found", user_id=user_id)


class InsufficientCoinsError(ValidationError):
    """User cannot afford a shop item."""

    def __init__(self, user_coins: int, required: int) -> None:
        super().__init__(
            f"Not enough coins to buy this item. You need {required} coins but only have {user_coins}.",
            user_coins=user_coins,
            required=required,
        )


class InventoryItemNotFoundError(NotFoundError):
    """Inventory entry does not exist or belongs to another user."""

    def __init__(self, item_id: int) -> None:
        super().__init__("Item not found in inventory", item_id=item_id)


class ItemAlreadyUsedError(ValidationError):
    """Inventory entry was already used."""

    def __init__(self, item_id: int) -> None:
        super().__init__("Item has already been used", item_id=item_id)


class TitleNotFoundError(NotFoundError):
    """User does not hold the title."""

    def __init__(self, title: str) -> None:
        super().__init__("Title not found", title=title)


class EmptyProfileUpdateError(ValidationError):
    """Profile update named neither total XP nor coins."""

    def __init__(self) -> None:
        super().__init__("Provide totalXp or coins to update.")


class NegativeTotalsError(ValidationError):
    """Profile update would make total XP or coins negative."""

    def __init__(self) -> None:
        super().__init__("totalXp and coins must be 0 or greater.")


class TotalsOutOfRangeError(ValidationError):
    """A credit or override does not fit the stored XP or coin totals."""

    def __init__(self, user_id: int) -> None:
        super().__init__("XP or coin total is out of range.", user_id=user_id)
