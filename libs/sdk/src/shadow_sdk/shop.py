"""Shop and inventory data models."""

from __future__ import annotations

import datetime as dt
from typing import Annotated

from msgspec import Meta, Struct

__all__ = (
    "InventoryDeleteResponse",
    "InventoryItemResponse",
    "PurchaseRequest",
    "PurchaseResponse",
    "PurchasedItem",
    "ShopItemCreateRequest",
    "ShopItemResponse",
    "ShopItemUpdateRequest",
)

ItemName = Annotated[str, Meta(min_length=1, max_length=100)]
ItemDescription = Annotated[str, Meta(min_length=1, max_length=500)]
ItemCost = Annotated[int, Meta(ge=1, le=10_000)]


class ShopItemCreateRequest(Struct):
    """Payload for adding an item to the shop.

    Attributes:
        name: Item name.
        description: Item description.
        cost: Price in coins.
    """

    name: ItemName
    description: ItemDescription
    cost: ItemCost


class ShopItemUpdateRequest(Struct):
    """Partial update of a shop item. Unset fields are left unchanged."""

    name: ItemName | None = None
    description: ItemDescription | None = None
    cost: ItemCost | None = None


class ShopItemResponse(Struct, rename="camel"):
    """Shop item.

    Attributes:
        id: Item ID.
        name: Item name.
        description: Item description.
        cost: Price in coins.
        created_by: Owner user ID.
        is_active: False once the item has been removed from the shop.
        created_at: Creation timestamp.
    """

    id: int
    name: str
    description: str
    cost: int
    created_by: int
    is_active: bool
    created_at: dt.datetime


class PurchaseRequest(Struct, rename="camel"):
    """Request to buy a shop item.

    Attributes:
        item_id: Shop item to buy.
    """

    item_id: int


class PurchasedItem(Struct):
    """Snapshot of the bought item."""

    name: str
    description: str
    cost: int


class PurchaseResponse(Struct, rename="camel"):
    """Result of a purchase.

    Attributes:
        remaining_coins: Coin balance after paying.
        purchased_item: The item added to the inventory.
        inventory_item_id: ID of the new inventory entry.
    """

    remaining_coins: int
    purchased_item: PurchasedItem
    inventory_item_id: int


class InventoryItemResponse(Struct, rename="camel"):
    """Item held in a user's inventory.

    Attributes:
        id: Inventory entry ID.
        name: Item name at purchase time.
        description: Item description at purchase time.
        cost: Price paid.
        purchased_at: Purchase timestamp.
        used: Whether the item has been used.
        used_at: When the item was used.
    """

    id: int
    name: str
    description: str
    cost: int
    purchased_at: dt.datetime
    used: bool = False
    used_at: dt.datetime | None = None


class InventoryDeleteResponse(Struct, rename="camel"):
    """Result of removing an inventory entry."""

    deleted_item_id: int
    item_name: str
