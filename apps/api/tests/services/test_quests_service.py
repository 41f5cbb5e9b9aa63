"""Unit tests for QuestsService."""

import datetime as dt

import pytest
from shadow_sdk.quests import (
    DailyQuestCreateRequest,
    DailyQuestUpdateRequest,
    DungeonQuestCreateRequest,
    PenaltyQuestUpdateRequest,
    SkillProgress,
    UpdatedProfile,
)

from repository.exceptions import (
    CheckConstraintViolationError,
    ForeignKeyViolationError,
    UniqueConstraintViolationError,
)
from services.exceptions.quests import (
    AlreadyCompletedTodayError,
    DungeonAlreadyCompletedError,
    NotQuestOwnerError,
    QuestNotFoundError,
    QuestValidationError,
)
from services.exceptions.users import UserNotFoundError
from services.quests_service import QuestsService
from services.reward_service import PenaltyRewardResult

pytestmark = [
    pytest.mark.domain_quests,
]

COMPLETED_AT = dt.datetime(2026, 3, 14, 10, 0, tzinfo=dt.timezone.utc)


@pytest.fixture
def service(
    mock_pool,
    mock_state,
    mock_quests_repo,
    mock_daily_status_repo,
    mock_penalty_repo,
    mock_users_repo,
    mock_reward_service,
    mock_daily_reset_service,
):
    return QuestsService(
        mock_pool,
        mock_state,
        mock_quests_repo,
        mock_daily_status_repo,
        mock_penalty_repo,
        mock_users_repo,
        mock_reward_service,
        mock_daily_reset_service,
    )


class TestDailyQuests:
    async def test_list_flags_completed_today(
        self, service, mock_quests_repo, mock_daily_status_repo, make_quest_row, frozen_today
    ):
        mock_quests_repo.fetch_quests.return_value = [make_quest_row(id=1), make_quest_row(id=2)]
        mock_daily_status_repo.fetch_status.return_value = {"completed_quest_ids": [2], "finished_today": False}

        quests = await service.list_daily_quests(7)

        assert [(q.id, q.is_completed) for q in quests] == [(1, False), (2, True)]
        mock_daily_status_repo.fetch_status.assert_awaited_once_with(7, frozen_today)

    async def test_list_without_status_row(
        self, service, mock_quests_repo, mock_daily_status_repo, make_quest_row, frozen_today
    ):
        mock_quests_repo.fetch_quests.return_value = [make_quest_row()]
        mock_daily_status_repo.fetch_status.return_value = None

        quests = await service.list_daily_quests(7)

        assert quests[0].is_completed is False

    async def test_create_trims_fields(self, service, mock_quests_repo, make_quest_row):
        mock_quests_repo.create_quest.return_value = make_quest_row()
        data = DailyQuestCreateRequest(name="  Morning run  ", xp=50, coins=10, skill=" Fitness ")

        quest = await service.create_daily_quest(7, data)

        mock_quests_repo.create_quest.assert_awaited_once_with(
            "daily", 7, {"name": "Morning run", "xp": 50, "coins": 10, "skill": "Fitness"}
        )
        assert quest.name == "Morning run"

    async def test_create_rejects_whitespace_name(self, service, mock_quests_repo):
        data = DailyQuestCreateRequest(name="     ", xp=50, coins=10, skill="Fitness")

        with pytest.raises(QuestValidationError):
            await service.create_daily_quest(7, data)

        mock_quests_repo.create_quest.assert_not_called()

    async def test_create_unknown_user(self, service, mock_quests_repo):
        mock_quests_repo.create_quest.side_effect = ForeignKeyViolationError(
            "daily_quests_created_by_fkey", "quests.daily_quests"
        )
        data = DailyQuestCreateRequest(name="Morning run", xp=50, coins=10, skill="Fitness")

        with pytest.raises(UserNotFoundError):
            await service.create_daily_quest(999, data)

    async def test_create_out_of_range_reward(self, service, mock_quests_repo):
        mock_quests_repo.create_quest.side_effect = CheckConstraintViolationError(
            "daily_quests_xp_check", "quests.daily_quests"
        )
        data = DailyQuestCreateRequest(name="Morning run", xp=50, coins=10, skill="Fitness")

        with pytest.raises(QuestValidationError):
            await service.create_daily_quest(7, data)

    async def test_update_only_sends_given_fields(self, service, mock_quests_repo, make_quest_row):
        mock_quests_repo.fetch_quest.return_value = make_quest_row()
        mock_quests_repo.update_quest.return_value = make_quest_row(xp=75)

        quest = await service.update_daily_quest(1, 7, DailyQuestUpdateRequest(xp=75))

        mock_quests_repo.update_quest.assert_awaited_once_with("daily", 1, {"xp": 75})
        assert quest.xp == 75

    async def test_update_missing_quest(self, service, mock_quests_repo):
        mock_quests_repo.fetch_quest.return_value = None

        with pytest.raises(QuestNotFoundError, match="Daily quest not found"):
            await service.update_daily_quest(1, 7, DailyQuestUpdateRequest(xp=75))

    async def test_update_someone_elses_quest(self, service, mock_quests_repo, make_quest_row):
        mock_quests_repo.fetch_quest.return_value = make_quest_row(created_by=8)

        with pytest.raises(NotQuestOwnerError, match="only modify your own quests"):
            await service.update_daily_quest(1, 7, DailyQuestUpdateRequest(xp=75))

        mock_quests_repo.update_quest.assert_not_called()

    async def test_delete_owned(self, service, mock_quests_repo, make_quest_row):
        mock_quests_repo.fetch_quest.return_value = make_quest_row()
        mock_quests_repo.delete_quest.return_value = True

        await service.delete_daily_quest(1, 7)

        mock_quests_repo.delete_quest.assert_awaited_once_with("daily", 1)

    async def test_delete_someone_elses_quest(self, service, mock_quests_repo, make_quest_row):
        mock_quests_repo.fetch_quest.return_value = make_quest_row(created_by=8)

        with pytest.raises(NotQuestOwnerError):
            await service.delete_daily_quest(1, 7)

        mock_quests_repo.delete_quest.assert_not_called()


class TestDungeonQuests:
    async def test_list_flags_cleared(self, service, mock_quests_repo, make_quest_row):
        mock_quests_repo.fetch_quests.return_value = [
            make_quest_row("dungeon", id=1),
            make_quest_row("dungeon", id=2),
        ]
        mock_quests_repo.fetch_completed_dungeon_ids.return_value = {1}

        quests = await service.list_dungeon_quests(7)

        assert [q.is_completed for q in quests] == [True, False]

    async def test_create_requires_title(self, service, mock_quests_repo):
        data = DungeonQuestCreateRequest(name="Red Gate", xp=200, coins=40, skill="Courage", title="   ")

        with pytest.raises(QuestValidationError, match="title"):
            await service.create_dungeon_quest(7, data)

    async def test_complete_credits_rewards(
        self, service, mock_pool, mock_quests_repo, mock_users_repo, mock_reward_service, make_quest_row
    ):
        quest = make_quest_row("dungeon", id=4, created_by=8)
        mock_quests_repo.fetch_quest.return_value = quest
        mock_users_repo.fetch_user.return_value = {"id": 7}
        mock_reward_service.credit_dungeon_completion.return_value = UpdatedProfile(
            total_xp=250,
            coins=150,
            new_title="Gate Breaker",
            title_awarded=True,
            skill_progress=SkillProgress(skill="Fitness", new_xp=50),
        )

        result = await service.complete_dungeon_quest(7, 4)

        mock_quests_repo.insert_dungeon_completion.assert_awaited_once_with(4, 7, conn=mock_pool.conn)
        mock_reward_service.credit_dungeon_completion.assert_awaited_once_with(7, quest, conn=mock_pool.conn)
        assert result.quest.is_completed is True
        assert result.updated_profile.new_title == "Gate Breaker"

    async def test_complete_missing_quest(self, service, mock_quests_repo, mock_reward_service):
        mock_quests_repo.fetch_quest.return_value = None

        with pytest.raises(QuestNotFoundError, match="Dungeon quest not found"):
            await service.complete_dungeon_quest(7, 4)

        mock_reward_service.credit_dungeon_completion.assert_not_called()

    async def test_complete_missing_user(self, service, mock_quests_repo, mock_users_repo, make_quest_row):
        mock_quests_repo.fetch_quest.return_value = make_quest_row("dungeon")
        mock_users_repo.fetch_user.return_value = None

        with pytest.raises(UserNotFoundError):
            await service.complete_dungeon_quest(7, 4)

        mock_quests_repo.insert_dungeon_completion.assert_not_called()

    async def test_complete_twice(
        self, service, mock_quests_repo, mock_users_repo, mock_reward_service, make_quest_row
    ):
        mock_quests_repo.fetch_quest.return_value = make_quest_row("dungeon")
        mock_users_repo.fetch_user.return_value = {"id": 7}
        mock_quests_repo.insert_dungeon_completion.side_effect = UniqueConstraintViolationError(
            "dungeon_completions_pkey", "quests.dungeon_completions"
        )

        with pytest.raises(DungeonAlreadyCompletedError, match="already completed"):
            await service.complete_dungeon_quest(7, 4)

        mock_reward_service.credit_dungeon_completion.assert_not_called()


class TestPenaltyQuests:
    async def test_list_reports_today(self, service, mock_quests_repo, mock_penalty_repo, make_quest_row, frozen_today):
        mock_quests_repo.fetch_quests.return_value = [
            make_quest_row("penalty", id=5),
            make_quest_row("penalty", id=6),
        ]
        mock_penalty_repo.fetch_completions_for_date.return_value = {5: COMPLETED_AT}

        quests = await service.list_penalty_quests(7)

        assert quests[0].is_completed_today is True
        assert quests[0].last_completed_at == COMPLETED_AT
        assert quests[1].is_completed_today is False
        assert quests[1].last_completed_at is None
        mock_penalty_repo.fetch_completions_for_date.assert_awaited_once_with(7, frozen_today)

    async def test_update_penalty(self, service, mock_quests_repo, make_quest_row):
        mock_quests_repo.fetch_quest.return_value = make_quest_row("penalty")
        mock_quests_repo.update_quest.return_value = make_quest_row("penalty", name="Cold shower")

        quest = await service.update_penalty_quest(1, 7, PenaltyQuestUpdateRequest(name=" Cold shower "))

        mock_quests_repo.update_quest.assert_awaited_once_with("penalty", 1, {"name": "Cold shower"})
        assert quest.name == "Cold shower"

    async def test_accept_credits_xp(
        self,
        service,
        mock_pool,
        mock_quests_repo,
        mock_daily_reset_service,
        mock_reward_service,
        make_quest_row,
        mocker,
    ):
        quest = make_quest_row("penalty", id=5, xp=80)
        next_reset = dt.datetime(2026, 3, 15, tzinfo=dt.timezone.utc)
        mocker.patch("services.quests_service.next_reset_at", return_value=next_reset)
        mock_quests_repo.fetch_quest.return_value = quest
        mock_daily_reset_service.record_penalty_completion.return_value = {"completed_at": COMPLETED_AT}
        mock_reward_service.credit_penalty_completion.return_value = PenaltyRewardResult(
            total_xp=580, level=2, skill_updated=True
        )

        result = await service.accept_penalty_quest(7, 5)

        mock_quests_repo.fetch_quest.assert_awaited_once_with("penalty", 5, conn=mock_pool.conn)
        mock_daily_reset_service.record_penalty_completion.assert_awaited_once_with(7, 5, conn=mock_pool.conn)
        assert result.xp_awarded == 80
        assert result.total_xp == 580
        assert result.level == 2
        assert result.completed_today is True
        assert result.skill_updated is True
        assert result.next_available == next_reset
        assert result.quest.is_completed_today is True

    async def test_accept_twice_in_one_day(
        self, service, mock_quests_repo, mock_daily_reset_service, mock_reward_service, make_quest_row, frozen_today
    ):
        mock_quests_repo.fetch_quest.return_value = make_quest_row("penalty", id=5)
        mock_daily_reset_service.record_penalty_completion.side_effect = AlreadyCompletedTodayError(5, frozen_today)

        with pytest.raises(AlreadyCompletedTodayError):
            await service.accept_penalty_quest(7, 5)

        mock_reward_service.credit_penalty_completion.assert_not_called()

    async def test_accept_someone_elses_quest(
        self, service, mock_quests_repo, mock_daily_reset_service, make_quest_row
    ):
        mock_quests_repo.fetch_quest.return_value = make_quest_row("penalty", created_by=8)

        with pytest.raises(NotQuestOwnerError):
            await service.accept_penalty_quest(7, 5)

        mock_daily_reset_service.record_penalty_completion.assert_not_called()
