"""Shop domain exceptions."""

from __future__ import annotations

from .common import NotFoundError, ValidationError


class ShopItemNotFoundError(NotFoundError):
    """Shop item does not exist or was removed from the shop."""

    def __init__(self, item_id: int) -> None:
        super().__init__("Shop item not found", item_id=item_id)


class ShopValidationError(ValidationError):
    """Shop item fields violate a business rule."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
