"""Service layer for shop item management."""

from __future__ import annotations

import logging

import msgspec
from asyncpg import Pool
from litestar.datastructures import State
from shadow_sdk.shop import ShopItemCreateRequest, ShopItemResponse, ShopItemUpdateRequest

from repository.exceptions import CheckConstraintViolationError, ForeignKeyViolationError
from repository.shop_repository import ShopRepository
from services.base import BaseService
from services.exceptions.common import NotOwnerError
from services.exceptions.shop import ShopItemNotFoundError, ShopValidationError
from services.exceptions.users import UserNotFoundError

log = logging.getLogger(__name__)


def _clean_text(fields: dict) -> dict:
    cleaned = dict(fields)
    for key in ("name", "description"):
        if key in cleaned:
            cleaned[key] = cleaned[key].strip()
            if not cleaned[key]:
                raise ShopValidationError(f"Item {key} cannot be empty")
    return cleaned


class ShopService(BaseService):
    """Service for creating, editing and removing shop items."""

    def __init__(self, pool: Pool, state: State, shop_repo: ShopRepository) -> None:
        """Initialize service.

        Args:
            pool: AsyncPG connection pool.
            state: Application state.
            shop_repo: Shop repository instance.
        """
        super().__init__(pool, state)
        self._shop_repo = shop_repo

    async def _fetch_owned(self, item_id: int, user_id: int) -> dict:
        item = await self._shop_repo.fetch_item(item_id)
        if item is None or not item["is_active"]:
            raise ShopItemNotFoundError(item_id)
        if item["created_by"] != user_id:
            raise NotOwnerError("item", item_id, user_id)
        return item

    async def list_items(self, user_id: int, *, show_all: bool = False) -> list[ShopItemResponse]:
        """List active shop items.

        Args:
            user_id: Requesting user.
            show_all: List every active item instead of only the user's own.

        Returns:
            Active items, cheapest first.
        """
        rows = await self._shop_repo.fetch_items(None if show_all else user_id)
        return [ShopItemResponse(**row) for row in rows]

    async def create_item(self, user_id: int, data: ShopItemCreateRequest) -> ShopItemResponse:
        """Add an item to the shop.

        Raises:
            ShopValidationError: If the name or description is blank.
        """
        fields = _clean_text(msgspec.structs.asdict(data))
        try:
            row = await self._shop_repo.create_item(user_id, fields["name"], fields["description"], fields["cost"])
        except ForeignKeyViolationError as e:
            raise UserNotFoundError(user_id) from e
        except CheckConstraintViolationError as e:
            raise ShopValidationError("Valid cost is required (1-10000 coins)") from e
        log.info("User %s added shop item %s (%r, %s coins)", user_id, row["id"], row["name"], row["cost"])
        return ShopItemResponse(**row)

    async def update_item(self, item_id: int, user_id: int, data: ShopItemUpdateRequest) -> ShopItemResponse:
        """Update one of the user's shop items.

        Raises:
            ShopItemNotFoundError: If the item does not exist or was removed.
            NotOwnerError: If the user does not own it.
        """
        await self._fetch_owned(item_id, user_id)
        updates = _clean_text({k: v for k, v in msgspec.structs.asdict(data).items() if v is not None})
        try:
            row = await self._shop_repo.update_item(item_id, updates)
        except CheckConstraintViolationError as e:
            raise ShopValidationError("Valid cost is required (1-10000 coins)") from e
        if row is None:
            raise ShopItemNotFoundError(item_id)
        return ShopItemResponse(**row)

    async def delete_item(self, item_id: int, user_id: int) -> None:
        """Remove one of the user's items from the shop.

        The row is kept with ``is_active`` cleared.
        """
        await self._fetch_owned(item_id, user_id)
        if not await self._shop_repo.deactivate_item(item_id):
            raise ShopItemNotFoundError(item_id)
        log.info("User %s removed shop item %s", user_id, item_id)
