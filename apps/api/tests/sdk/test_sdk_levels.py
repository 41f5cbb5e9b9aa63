import datetime as dt

import msgspec
import pytest
from shadow_sdk.daily import CompleteDailyQuestsRequest
from shadow_sdk.skills import SkillResponse
from shadow_sdk.users import ProfileResponse, ProfileUpdateRequest, QuestStat, QuestStats
from shadow_sdk.utilities import skill_level, user_rank

pytestmark = [
    pytest.mark.domain_utilities,
]

NOW = dt.datetime(2026, 3, 14, 9, 30, tzinfo=dt.timezone.utc)


@pytest.mark.parametrize(("xp", "level"), [(0, 0), (99, 0), (100, 1), (250, 2), (-40, 0)])
def test_skill_level(xp, level) -> None:
    assert skill_level(xp) == level


@pytest.mark.parametrize(("xp", "rank"), [(0, 0), (249, 0), (250, 1), (760, 3)])
def test_user_rank(xp, rank) -> None:
    assert user_rank(xp) == rank


def test_skill_response_derives_level() -> None:
    skill = SkillResponse(id=1, name="Fitness", xp=420, created_by=7, created_at=NOW, level=99)

    assert skill.level == 4
    assert msgspec.to_builtins(skill)["createdBy"] == 7


def test_profile_response_derives_level() -> None:
    stat = QuestStat(total=0, completed=0)
    profile = ProfileResponse(
        name="hunter",
        xp=500,
        coins=0,
        achievements=[],
        titles=[],
        skill_xp={},
        quest_stats=QuestStats(daily_quests=stat, dungeon_quests=stat, penalty_quests=stat),
    )

    assert profile.level == 2


def test_complete_daily_request_decodes_wire_names() -> None:
    payload = b'{"completedQuestIds": [1, 2], "totalXP": 150, "totalCoins": 30, "skillXPUpdates": {"Fitness": 50}}'

    req = msgspec.json.decode(payload, type=CompleteDailyQuestsRequest)

    assert req.completed_quest_ids == [1, 2]
    assert req.total_xp == 150
    assert req.skill_xp_updates == {"Fitness": 50}


def test_complete_daily_request_requires_positive_xp() -> None:
    with pytest.raises(msgspec.ValidationError):
        msgspec.json.decode(
            b'{"completedQuestIds": [1], "totalXP": 0, "totalCoins": 30}', type=CompleteDailyQuestsRequest
        )


def test_complete_daily_request_rejects_oversized_reward() -> None:
    with pytest.raises(msgspec.ValidationError):
        msgspec.json.decode(
            b'{"completedQuestIds": [1], "totalXP": 3000000000, "totalCoins": 1}', type=CompleteDailyQuestsRequest
        )


def test_complete_daily_request_rejects_oversized_skill_xp() -> None:
    with pytest.raises(msgspec.ValidationError):
        msgspec.json.decode(
            b'{"completedQuestIds": [1], "totalXP": 10, "totalCoins": 1, "skillXPUpdates": {"Fitness": 3000000000}}',
            type=CompleteDailyQuestsRequest,
        )


def test_profile_update_rejects_oversized_balance() -> None:
    with pytest.raises(msgspec.ValidationError):
        msgspec.json.decode(b'{"coins": 3000000000}', type=ProfileUpdateRequest)


def test_profile_update_accepts_upper_bound() -> None:
    req = msgspec.json.decode(b'{"totalXp": 1000000000}', type=ProfileUpdateRequest)

    assert req.total_xp == 1_000_000_000
