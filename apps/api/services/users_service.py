"""Service layer for user profile, purchases, inventory and titles."""

from __future__ import annotations

import logging

from asyncpg import Pool
from litestar.datastructures import State
from shadow_sdk.shop import (
    InventoryDeleteResponse,
    InventoryItemResponse,
    PurchasedItem,
    PurchaseResponse,
)
from shadow_sdk.users import (
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    QuestStat,
    QuestStats,
    TitleDeleteResponse,
    TitleResponse,
)
from shadow_sdk.utilities import user_rank

from repository.exceptions import CheckConstraintViolationError, NumericOutOfRangeError
from repository.shop_repository import ShopRepository
from repository.skills_repository import SkillsRepository
from repository.users_repository import UsersRepository
from services.base import BaseService
from services.exceptions.shop import ShopItemNotFoundError
from services.exceptions.users import (
    EmptyProfileUpdateError,
    InsufficientCoinsError,
    InventoryItemNotFoundError,
    ItemAlreadyUsedError,
    NegativeTotalsError,
    TitleNotFoundError,
    TotalsOutOfRangeError,
    UserNotFoundError,
)

log = logging.getLogger(__name__)

# (threshold, achievement) pairs per measured quantity
DAILY_ACHIEVEMENTS = ((10, "Daily Warrior"), (50, "Routine Master"))
DUNGEON_ACHIEVEMENTS = ((5, "Dungeon Slayer"), (20, "Dungeon Master"))
LEVEL_ACHIEVEMENTS = ((50, "Elite Hunter"), (80, "Shadow Legion"))
XP_ACHIEVEMENTS = ((10_000, "XP Collector"),)
TOTAL_ACHIEVEMENTS = ((100, "Quest Master"), (250, "Legendary Achiever"))
SKILL_ACHIEVEMENTS = ((5, "Versatile Hunter"), (10, "Master of All"))


def derive_achievements(stats: dict, total_xp: int) -> list[str]:
    """Derive achievement titles from a user's progress.

    Args:
        stats: Per-user counts from ``UsersRepository.fetch_quest_stats``.
        total_xp: User total XP.

    Returns:
        Achievement names in a stable order.
    """
    measured = (
        (stats["daily_completed"], DAILY_ACHIEVEMENTS),
        (stats["dungeon_completed"], DUNGEON_ACHIEVEMENTS),
        (user_rank(total_xp), LEVEL_ACHIEVEMENTS),
        (total_xp, XP_ACHIEVEMENTS),
        (stats["daily_completed"] + stats["dungeon_completed"], TOTAL_ACHIEVEMENTS),
        (stats["skills_used"], SKILL_ACHIEVEMENTS),
    )
    return [name for value, tiers in measured for threshold, name in tiers if value >= threshold]


class UsersService(BaseService):
    """Service for everything hanging off a user: totals, titles and inventory."""

    def __init__(
        self,
        pool: Pool,
        state: State,
        users_repo: UsersRepository,
        shop_repo: ShopRepository,
        skills_repo: SkillsRepository,
    ) -> None:
        """Initialize service.

        Args:
            pool: AsyncPG connection pool.
            state: Application state.
            users_repo: Users repository instance.
            shop_repo: Shop repository instance.
            skills_repo: Skills repository instance.
        """
        super().__init__(pool, state)
        self._users_repo = users_repo
        self._shop_repo = shop_repo
        self._skills_repo = skills_repo

    async def _require_user(self, user_id: int) -> dict:
        user = await self._users_repo.fetch_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    # ===== Profile =====

    async def get_profile(self, user_id: int) -> ProfileResponse:
        """Build the user's aggregated profile.

        Args:
            user_id: User ID.

        Returns:
            Totals, derived level and achievements, titles, skill XP and quest stats.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        user = await self._require_user(user_id)
        stats = await self._users_repo.fetch_quest_stats(user_id)
        titles = await self._users_repo.fetch_titles(user_id)
        skill_xp = await self._skills_repo.fetch_skill_xp_map(user_id)

        return ProfileResponse(
            name=user["username"],
            xp=user["total_xp"],
            coins=user["coins"],
            achievements=derive_achievements(stats, user["total_xp"]),
            titles=[TitleResponse(**title) for title in titles],
            skill_xp=skill_xp,
            quest_stats=QuestStats(
                daily_quests=QuestStat(total=stats["daily_total"], completed=stats["daily_completed"]),
                dungeon_quests=QuestStat(total=stats["dungeon_total"], completed=stats["dungeon_completed"]),
                penalty_quests=QuestStat(total=stats["penalty_total"], completed=stats["penalty_completed"]),
            ),
        )

    async def update_profile(self, user_id: int, data: ProfileUpdateRequest) -> ProfileUpdateResponse:
        """Overwrite the user's totals (editor mode).

        Raises:
            EmptyProfileUpdateError: If neither total XP nor coins was given.
            NegativeTotalsError: If a value is below 0.
            TotalsOutOfRangeError: If a value does not fit the stored totals.
            UserNotFoundError: If the user does not exist.
        """
        if data.total_xp is None and data.coins is None:
            raise EmptyProfileUpdateError()
        try:
            totals = await self._users_repo.set_totals(user_id, total_xp=data.total_xp, coins=data.coins)
        except CheckConstraintViolationError as e:
            raise NegativeTotalsError() from e
        except NumericOutOfRangeError as e:
            raise TotalsOutOfRangeError(user_id) from e
        if totals is None:
            raise UserNotFoundError(user_id)
        log.info("User %s set totals to %s XP, %s coins", user_id, totals["total_xp"], totals["coins"])
        return ProfileUpdateResponse(total_xp=totals["total_xp"], coins=totals["coins"])

    # ===== Purchases and inventory =====

    async def purchase_item(self, user_id: int, item_id: int) -> PurchaseResponse:
        """Buy a shop item and add it to the user's inventory.

        The coin deduction is conditional on the balance, so a concurrent
        purchase can never drive coins negative.

        Args:
            user_id: Buyer.
            item_id: Shop item to buy.

        Returns:
            Remaining coins and the purchased item.

        Raises:
            ShopItemNotFoundError: If the item does not exist or was removed from the shop.
            InsufficientCoinsError: If the user cannot afford the item.
            UserNotFoundError: If the user does not exist.
        """
        item = await self._shop_repo.fetch_item(item_id)
        if item is None or not item["is_active"]:
            raise ShopItemNotFoundError(item_id)

        async with self._pool.acquire() as conn, conn.transaction():
            remaining = await self._users_repo.deduct_coins(user_id, item["cost"], conn=conn)
            if remaining is None:
                coins = await self._users_repo.fetch_coins(user_id, conn=conn)
                if coins is None:
                    raise UserNotFoundError(user_id)
                log.info("Rejected purchase of item %s by user %s: %s < %s", item_id, user_id, coins, item["cost"])
                raise InsufficientCoinsError(coins, item["cost"])

            inventory_item_id = await self._users_repo.insert_inventory_item(
                user_id,
                item["name"],
                item["description"],
                item["cost"],
                conn=conn,
            )

        log.info("User %s purchased item %s (%r) for %s coins", user_id, item_id, item["name"], item["cost"])
        return PurchaseResponse(
            remaining_coins=remaining,
            purchased_item=PurchasedItem(name=item["name"], description=item["description"], cost=item["cost"]),
            inventory_item_id=inventory_item_id,
        )

    async def list_inventory(self, user_id: int) -> list[InventoryItemResponse]:
        """List the user's inventory, newest first."""
        rows = await self._users_repo.fetch_inventory(user_id)
        return [InventoryItemResponse(**row) for row in rows]

    async def use_inventory_item(self, user_id: int, item_id: int) -> InventoryItemResponse:
        """Mark an inventory item as used.

        Raises:
            InventoryItemNotFoundError: If the item is not in the user's inventory.
            ItemAlreadyUsedError: If the item was already used.
        """
        row = await self._users_repo.mark_inventory_item_used(user_id, item_id)
        if row is None:
            existing = await self._users_repo.fetch_inventory_item(user_id, item_id)
            if existing is None:
                raise InventoryItemNotFoundError(item_id)
            raise ItemAlreadyUsedError(item_id)
        return InventoryItemResponse(**row)

    async def delete_inventory_item(self, user_id: int, item_id: int) -> InventoryDeleteResponse:
        """Remove an item from the user's inventory.

        Raises:
            InventoryItemNotFoundError: If the item is not in the user's inventory.
        """
        name = await self._users_repo.delete_inventory_item(user_id, item_id)
        if name is None:
            raise InventoryItemNotFoundError(item_id)
        return InventoryDeleteResponse(deleted_item_id=item_id, item_name=name)

    # ===== Titles =====

    async def delete_title(self, user_id: int, title: str) -> TitleDeleteResponse:
        """Remove a title from the user.

        Raises:
            TitleNotFoundError: If the user does not hold the title.
        """
        if not await self._users_repo.delete_title(user_id, title):
            raise TitleNotFoundError(title)
        remaining = await self._users_repo.fetch_titles(user_id)
        return TitleDeleteResponse(
            deleted_title=title,
            remaining_titles=[TitleResponse(**row) for row in remaining],
        )
