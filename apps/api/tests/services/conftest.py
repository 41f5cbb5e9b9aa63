"""Shared fixtures for service unit tests.

This module provides mock fixtures for repositories, pools, and state objects
used across service unit tests. All repository fixtures use AsyncMock to handle
async/await automatically.
"""

import datetime as dt

import pytest
from asyncpg import Pool
from litestar.datastructures import State

from repository.auth_repository import AuthRepository
from repository.daily_rewards_repository import DailyRewardsRepository
from repository.daily_status_repository import DailyStatusRepository
from repository.penalty_quests_repository import PenaltyQuestsRepository
from repository.quests_repository import QuestsRepository
from repository.shop_repository import ShopRepository
from repository.skills_repository import SkillsRepository
from repository.users_repository import UsersRepository
from services.daily_reset_service import DailyResetService
from services.reward_service import RewardService

NOW = dt.datetime(2026, 3, 14, 9, 30, tzinfo=dt.timezone.utc)
TODAY = dt.date(2026, 3, 14)


@pytest.fixture
def mock_pool(mocker):
    """Mock AsyncPG connection pool.

    Returns:
        MagicMock pool with acquire() and transaction() context managers configured.
    """
    pool = mocker.MagicMock(spec=Pool)
    conn = mocker.MagicMock()

    async def mock_acquire_aenter(self):
        return conn

    async def mock_acquire_aexit(self, exc_type, exc_val, exc_tb):
        return None

    acquire_cm = mocker.MagicMock()
    acquire_cm.__aenter__ = mock_acquire_aenter
    acquire_cm.__aexit__ = mock_acquire_aexit
    pool.acquire.return_value = acquire_cm

    async def mock_transaction_aenter(self):
        return None

    async def mock_transaction_aexit(self, exc_type, exc_val, exc_tb):
        return None

    transaction_cm = mocker.MagicMock()
    transaction_cm.__aenter__ = mock_transaction_aenter
    transaction_cm.__aexit__ = mock_transaction_aexit
    conn.transaction.return_value = transaction_cm

    pool.conn = conn
    return pool


@pytest.fixture
def mock_state(mocker):
    """Mock Litestar State."""
    return mocker.Mock(spec=State)


@pytest.fixture
def frozen_today(mocker):
    """Pin the reset key used by the daily reset and quest services."""
    mocker.patch("services.daily_reset_service.reset_key", return_value=TODAY)
    mocker.patch("services.quests_service.reset_key", return_value=TODAY)
    return TODAY


# Repository Fixtures


@pytest.fixture
def mock_auth_repo(mocker):
    """Mock AuthRepository."""
    return mocker.AsyncMock(spec=AuthRepository)


@pytest.fixture
def mock_users_repo(mocker):
    """Mock UsersRepository."""
    return mocker.AsyncMock(spec=UsersRepository)


@pytest.fixture
def mock_skills_repo(mocker):
    """Mock SkillsRepository."""
    return mocker.AsyncMock(spec=SkillsRepository)


@pytest.fixture
def mock_quests_repo(mocker):
    """Mock QuestsRepository."""
    return mocker.AsyncMock(spec=QuestsRepository)


@pytest.fixture
def mock_daily_status_repo(mocker):
    """Mock DailyStatusRepository."""
    return mocker.AsyncMock(spec=DailyStatusRepository)


@pytest.fixture
def mock_penalty_repo(mocker):
    """Mock PenaltyQuestsRepository."""
    return mocker.AsyncMock(spec=PenaltyQuestsRepository)


@pytest.fixture
def mock_shop_repo(mocker):
    """Mock ShopRepository."""
    return mocker.AsyncMock(spec=ShopRepository)


@pytest.fixture
def mock_rewards_repo(mocker):
    """Mock DailyRewardsRepository."""
    return mocker.AsyncMock(spec=DailyRewardsRepository)


# Service Fixtures (for services that depend on other services)


@pytest.fixture
def mock_reward_service(mocker):
    """Mock RewardService."""
    return mocker.AsyncMock(spec=RewardService)


@pytest.fixture
def mock_daily_reset_service(mocker):
    """Mock DailyResetService."""
    return mocker.AsyncMock(spec=DailyResetService)


# Row builders


def quest_row(kind: str = "daily", **overrides) -> dict:
    """Build a quest row shaped like QuestsRepository output."""
    row = {
        "id": 1,
        "name": "Morning run",
        "xp": 50,
        "skill": "Fitness",
        "created_by": 7,
        "created_at": NOW,
    }
    if kind in ("daily", "dungeon"):
        row["coins"] = 10
    if kind == "dungeon":
        row["title"] = "Gate Breaker"
    row.update(overrides)
    return row


def skill_row(**overrides) -> dict:
    """Build a skill row shaped like SkillsRepository output."""
    row = {"id": 3, "name": "Fitness", "xp": 250, "created_by": 7, "created_at": NOW}
    row.update(overrides)
    return row


def shop_item_row(**overrides) -> dict:
    """Build a shop item row shaped like ShopRepository output."""
    row = {
        "id": 11,
        "name": "Movie night",
        "description": "Watch a film guilt-free",
        "cost": 40,
        "created_by": 7,
        "is_active": True,
        "created_at": NOW,
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_quest_row():
    """Quest row builder."""
    return quest_row


@pytest.fixture
def make_skill_row():
    """Skill row builder."""
    return skill_row


@pytest.fixture
def make_shop_item_row():
    """Shop item row builder."""
    return shop_item_row
