"""Unit tests for UsersService."""

import datetime as dt

import pytest
from shadow_sdk.users import ProfileUpdateRequest

from repository.exceptions import CheckConstraintViolationError, NumericOutOfRangeError
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
from services.users_service import UsersService, derive_achievements

pytestmark = [
    pytest.mark.domain_users,
]

AWARDED_AT = dt.datetime(2026, 3, 1, 12, 0, tzinfo=dt.timezone.utc)


def _stats(**overrides) -> dict:
    stats = {
        "daily_total": 0,
        "daily_completed": 0,
        "dungeon_total": 0,
        "dungeon_completed": 0,
        "penalty_total": 0,
        "penalty_completed": 0,
        "skills_used": 0,
    }
    stats.update(overrides)
    return stats


@pytest.fixture
def service(mock_pool, mock_state, mock_users_repo, mock_shop_repo, mock_skills_repo):
    return UsersService(mock_pool, mock_state, mock_users_repo, mock_shop_repo, mock_skills_repo)


class TestDeriveAchievements:
    def test_new_user_has_none(self):
        assert derive_achievements(_stats(), 0) == []

    def test_thresholds_are_inclusive(self):
        achievements = derive_achievements(_stats(daily_completed=10, dungeon_completed=5, skills_used=5), 0)

        assert achievements == ["Daily Warrior", "Dungeon Slayer", "Versatile Hunter"]

    def test_level_and_xp_tiers(self):
        # 80 * 250 XP puts the user at level 80
        achievements = derive_achievements(_stats(), 20_000)

        assert achievements == ["Elite Hunter", "Shadow Legion", "XP Collector"]

    def test_total_completions_combine_daily_and_dungeon(self):
        achievements = derive_achievements(_stats(daily_completed=80, dungeon_completed=20), 0)

        assert "Quest Master" in achievements
        assert "Legendary Achiever" not in achievements


class TestProfile:
    async def test_get_profile(self, service, mock_users_repo, mock_skills_repo):
        mock_users_repo.fetch_user.return_value = {"id": 7, "username": "jinwoo", "total_xp": 760, "coins": 130}
        mock_users_repo.fetch_quest_stats.return_value = _stats(daily_total=4, daily_completed=12, penalty_total=2)
        mock_users_repo.fetch_titles.return_value = [
            {"name": "Gate Breaker", "source": "dungeon_quest", "awarded_at": AWARDED_AT}
        ]
        mock_skills_repo.fetch_skill_xp_map.return_value = {"Fitness": 300}

        profile = await service.get_profile(7)

        assert profile.name == "jinwoo"
        assert profile.level == 3
        assert profile.achievements == ["Daily Warrior"]
        assert profile.titles[0].name == "Gate Breaker"
        assert profile.skill_xp == {"Fitness": 300}
        assert profile.quest_stats.daily_quests.total == 4
        assert profile.quest_stats.daily_quests.completed == 12
        assert profile.quest_stats.penalty_quests.total == 2

    async def test_get_profile_missing_user(self, service, mock_users_repo):
        mock_users_repo.fetch_user.return_value = None

        with pytest.raises(UserNotFoundError, match="User not found"):
            await service.get_profile(7)

    async def test_update_profile(self, service, mock_users_repo):
        mock_users_repo.set_totals.return_value = {"total_xp": 500, "coins": 100}

        result = await service.update_profile(7, ProfileUpdateRequest(total_xp=500))

        mock_users_repo.set_totals.assert_awaited_once_with(7, total_xp=500, coins=None)
        assert result.total_xp == 500

    async def test_update_profile_requires_a_field(self, service, mock_users_repo):
        with pytest.raises(EmptyProfileUpdateError):
            await service.update_profile(7, ProfileUpdateRequest())

        mock_users_repo.set_totals.assert_not_called()

    async def test_update_profile_negative_total(self, service, mock_users_repo):
        mock_users_repo.set_totals.side_effect = CheckConstraintViolationError("users_coins_check", "core.users")

        with pytest.raises(NegativeTotalsError) as exc_info:
            await service.update_profile(7, ProfileUpdateRequest(coins=0))

        assert exc_info.value.message == "totalXp and coins must be 0 or greater."

    async def test_update_profile_out_of_range(self, service, mock_users_repo):
        mock_users_repo.set_totals.side_effect = NumericOutOfRangeError("core.users", "value out of range")

        with pytest.raises(TotalsOutOfRangeError):
            await service.update_profile(7, ProfileUpdateRequest(total_xp=1_000_000_000))


class TestPurchase:
    async def test_purchase(self, service, mock_pool, mock_users_repo, mock_shop_repo, make_shop_item_row):
        mock_shop_repo.fetch_item.return_value = make_shop_item_row(created_by=8, cost=40)
        mock_users_repo.deduct_coins.return_value = 60
        mock_users_repo.insert_inventory_item.return_value = 21

        result = await service.purchase_item(7, 11)

        mock_users_repo.deduct_coins.assert_awaited_once_with(7, 40, conn=mock_pool.conn)
        mock_users_repo.insert_inventory_item.assert_awaited_once_with(
            7, "Movie night", "Watch a film guilt-free", 40, conn=mock_pool.conn
        )
        assert result.remaining_coins == 60
        assert result.inventory_item_id == 21
        assert result.purchased_item.name == "Movie night"

    async def test_insufficient_coins(self, service, mock_users_repo, mock_shop_repo, make_shop_item_row):
        mock_shop_repo.fetch_item.return_value = make_shop_item_row(cost=40)
        mock_users_repo.deduct_coins.return_value = None
        mock_users_repo.fetch_coins.return_value = 25

        with pytest.raises(InsufficientCoinsError) as exc_info:
            await service.purchase_item(7, 11)

        assert exc_info.value.message == "Not enough coins to buy this item. You need 40 coins but only have 25."
        mock_users_repo.insert_inventory_item.assert_not_called()

    async def test_inactive_item(self, service, mock_users_repo, mock_shop_repo, make_shop_item_row):
        mock_shop_repo.fetch_item.return_value = make_shop_item_row(is_active=False)

        with pytest.raises(ShopItemNotFoundError):
            await service.purchase_item(7, 11)

        mock_users_repo.deduct_coins.assert_not_called()

    async def test_missing_user(self, service, mock_users_repo, mock_shop_repo, make_shop_item_row):
        mock_shop_repo.fetch_item.return_value = make_shop_item_row()
        mock_users_repo.deduct_coins.return_value = None
        mock_users_repo.fetch_coins.return_value = None

        with pytest.raises(UserNotFoundError):
            await service.purchase_item(7, 11)


class TestInventoryAndTitles:
    async def test_use_item(self, service, mock_users_repo):
        mock_users_repo.mark_inventory_item_used.return_value = {
            "id": 21,
            "name": "Movie night",
            "description": "Watch a film guilt-free",
            "cost": 40,
            "purchased_at": AWARDED_AT,
            "used": True,
            "used_at": AWARDED_AT,
        }

        item = await service.use_inventory_item(7, 21)

        assert item.used is True

    async def test_use_item_twice(self, service, mock_users_repo):
        mock_users_repo.mark_inventory_item_used.return_value = None
        mock_users_repo.fetch_inventory_item.return_value = {"id": 21, "used": True}

        with pytest.raises(ItemAlreadyUsedError):
            await service.use_inventory_item(7, 21)

    async def test_use_missing_item(self, service, mock_users_repo):
        mock_users_repo.mark_inventory_item_used.return_value = None
        mock_users_repo.fetch_inventory_item.return_value = None

        with pytest.raises(InventoryItemNotFoundError):
            await service.use_inventory_item(7, 21)

    async def test_delete_item(self, service, mock_users_repo):
        mock_users_repo.delete_inventory_item.return_value = "Movie night"

        result = await service.delete_inventory_item(7, 21)

        assert result.deleted_item_id == 21
        assert result.item_name == "Movie night"

    async def test_delete_missing_item(self, service, mock_users_repo):
        mock_users_repo.delete_inventory_item.return_value = None

        with pytest.raises(InventoryItemNotFoundError):
            await service.delete_inventory_item(7, 21)

    async def test_delete_title(self, service, mock_users_repo):
        mock_users_repo.delete_title.return_value = True
        mock_users_repo.fetch_titles.return_value = []

        result = await service.delete_title(7, "Gate Breaker")

        assert result.deleted_title == "Gate Breaker"
        assert result.remaining_titles == []

    async def test_delete_missing_title(self, service, mock_users_repo):
        mock_users_repo.delete_title.return_value = False

        with pytest.raises(TitleNotFoundError):
            await service.delete_title(7, "Gate Breaker")
