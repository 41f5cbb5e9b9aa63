"""Repository queries run against a migrated Postgres.

Test Coverage:
- A finished day is immutable for both writers
- Penalty completions are unique per reset key
- Skill XP upserts match names case-insensitively
- Coin deduction never drives a balance negative
- Totals that leave the bigint range are reported, not stored
"""

import datetime as dt

import asyncpg
import pytest

from repository.daily_status_repository import DailyStatusRepository
from repository.exceptions import NumericOutOfRangeError, UniqueConstraintViolationError
from repository.penalty_quests_repository import PenaltyQuestsRepository
from repository.skills_repository import SkillsRepository
from repository.users_repository import UsersRepository

TODAY = dt.date(2026, 3, 14)


@pytest.mark.domain_daily
class TestDailyStatus:
    async def test_second_finish_day_is_a_no_op(
        self, asyncpg_conn: asyncpg.Connection, create_test_user, fetch_totals
    ):
        user_id = await create_test_user()
        repository = DailyStatusRepository(asyncpg_conn)
        users = UsersRepository(asyncpg_conn)

        first = await repository.finish_day(user_id, TODAY, [1, 2])
        await users.add_rewards(user_id, 50, 10)
        before = await fetch_totals(user_id)

        second = await repository.finish_day(user_id, TODAY, [1, 2, 3])

        assert first["finished_today"] is True
        assert second is None
        assert await fetch_totals(user_id) == before
        status = await repository.fetch_status(user_id, TODAY)
        assert status["completed_quest_ids"] == [1, 2]

    async def test_toggle_after_finish_is_rejected(self, asyncpg_conn: asyncpg.Connection, create_test_user):
        user_id = await create_test_user()
        repository = DailyStatusRepository(asyncpg_conn)
        await repository.toggle_quest(user_id, TODAY, 1)
        await repository.finish_day(user_id, TODAY, [1])

        result = await repository.toggle_quest(user_id, TODAY, 2)

        assert result is None
        status = await repository.fetch_status(user_id, TODAY)
        assert status["completed_quest_ids"] == [1]

    async def test_toggle_adds_then_removes(self, asyncpg_conn: asyncpg.Connection, create_test_user):
        user_id = await create_test_user()
        repository = DailyStatusRepository(asyncpg_conn)

        added = await repository.toggle_quest(user_id, TODAY, 4)
        removed = await repository.toggle_quest(user_id, TODAY, 4)

        assert added["completed_quest_ids"] == [4]
        assert removed["completed_quest_ids"] == []

    async def test_finish_day_is_keyed_per_day(self, asyncpg_conn: asyncpg.Connection, create_test_user):
        user_id = await create_test_user()
        repository = DailyStatusRepository(asyncpg_conn)
        await repository.finish_day(user_id, TODAY, [1])

        tomorrow = await repository.finish_day(user_id, TODAY + dt.timedelta(days=1), [])

        assert tomorrow is not None


@pytest.mark.domain_quests
class TestPenaltyCompletions:
    async def test_duplicate_completion_is_rejected(self, asyncpg_conn: asyncpg.Connection, create_test_user):
        user_id = await create_test_user()
        quest_id = await asyncpg_conn.fetchval(
            """
            INSERT INTO quests.penalty_quests (name, xp, skill, created_by)
            VALUES ('Cold shower', 80, 'Discipline', $1)
            RETURNING id
            """,
            user_id,
        )
        repository = PenaltyQuestsRepository(asyncpg_conn)
        await repository.insert_completion(quest_id, user_id, TODAY)

        with pytest.raises(UniqueConstraintViolationError) as exc_info:
            await repository.insert_completion(quest_id, user_id, TODAY)

        assert exc_info.value.constraint_name == "penalty_completions_once_per_day_key"
        assert await repository.has_completion(quest_id, user_id, TODAY) is True
        assert await repository.insert_completion(quest_id, user_id, TODAY + dt.timedelta(days=1))


@pytest.mark.domain_skills
class TestSkillXp:
    async def test_upsert_matches_existing_name_case_insensitively(
        self, asyncpg_conn: asyncpg.Connection, create_test_user
    ):
        user_id = await create_test_user()
        repository = SkillsRepository(asyncpg_conn)
        await repository.create_skill(user_id, "Fitness", 100)

        row = await repository.upsert_skill_xp(user_id, "fitness", 50)

        assert row["name"] == "Fitness"
        assert row["xp"] == 150
        count = await asyncpg_conn.fetchval("SELECT count(*) FROM skills.skills WHERE created_by = $1", user_id)
        assert count == 1

    async def test_create_duplicate_name_is_rejected(self, asyncpg_conn: asyncpg.Connection, create_test_user):
        user_id = await create_test_user()
        repository = SkillsRepository(asyncpg_conn)
        await repository.create_skill(user_id, "Reading", 0)

        with pytest.raises(UniqueConstraintViolationError):
            await repository.create_skill(user_id, "READING", 0)


@pytest.mark.domain_users
class TestUserTotals:
    async def test_deduct_more_than_balance(self, asyncpg_conn: asyncpg.Connection, create_test_user):
        user_id = await create_test_user(coins=50)
        repository = UsersRepository(asyncpg_conn)

        result = await repository.deduct_coins(user_id, 100)

        assert result is None
        assert await repository.fetch_coins(user_id) == 50

    async def test_deduct_exact_balance(self, asyncpg_conn: asyncpg.Connection, create_test_user):
        user_id = await create_test_user(coins=50)
        repository = UsersRepository(asyncpg_conn)

        assert await repository.deduct_coins(user_id, 50) == 0

    async def test_add_rewards_past_bigint_range(
        self, asyncpg_conn: asyncpg.Connection, create_test_user, fetch_totals
    ):
        user_id = await create_test_user(total_xp=9_223_372_036_854_775_000)
        repository = UsersRepository(asyncpg_conn)

        with pytest.raises(NumericOutOfRangeError):
            await repository.add_rewards(user_id, 1_000_000, 0)

        assert (await fetch_totals(user_id))["total_xp"] == 9_223_372_036_854_775_000
