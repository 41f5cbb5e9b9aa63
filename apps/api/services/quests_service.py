"""Service layer for quest CRUD and dungeon/penalty completion."""

from __future__ import annotations

import logging

import msgspec
from asyncpg import Connection, Pool
from litestar.datastructures import State
from shadow_sdk.quests import (
    DailyQuestCreateRequest,
    DailyQuestResponse,
    DailyQuestUpdateRequest,
    DungeonCompletionResponse,
    DungeonQuestCreateRequest,
    DungeonQuestResponse,
    DungeonQuestUpdateRequest,
    PenaltyAcceptResponse,
    PenaltyQuestCreateRequest,
    PenaltyQuestResponse,
    PenaltyQuestUpdateRequest,
)

from repository.daily_status_repository import DailyStatusRepository
from repository.exceptions import (
    CheckConstraintViolationError,
    ForeignKeyViolationError,
    UniqueConstraintViolationError,
)
from repository.penalty_quests_repository import PenaltyQuestsRepository
from repository.quests_repository import QuestKind, QuestsRepository
from repository.users_repository import UsersRepository
from services.base import BaseService
from services.daily_reset_service import DailyResetService
from services.exceptions.quests import (
    DungeonAlreadyCompletedError,
    NotQuestOwnerError,
    QuestNotFoundError,
    QuestValidationError,
)
from services.exceptions.users import UserNotFoundError
from services.reward_service import RewardService
from utilities.reset_period import next_reset_at, reset_key

log = logging.getLogger(__name__)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 100

QuestCreateRequest = DailyQuestCreateRequest | DungeonQuestCreateRequest | PenaltyQuestCreateRequest
QuestUpdateRequest = DailyQuestUpdateRequest | DungeonQuestUpdateRequest | PenaltyQuestUpdateRequest


def _clean_fields(fields: dict) -> dict:
    """Trim text fields and reject values that are blank once trimmed."""
    cleaned = dict(fields)
    if "name" in cleaned:
        cleaned["name"] = cleaned["name"].strip()
        if not NAME_MIN_LENGTH <= len(cleaned["name"]) <= NAME_MAX_LENGTH:
            raise QuestValidationError(
                f"Quest name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
            )
    for key in ("skill", "title"):
        if key in cleaned:
            cleaned[key] = cleaned[key].strip()
            if not cleaned[key]:
                raise QuestValidationError(f"Quest {key} cannot be empty")
    return cleaned


class QuestsService(BaseService):
    """Owner-scoped quest CRUD plus the dungeon and penalty completion flows."""

    def __init__(
        self,
        pool: Pool,
        state: State,
        quests_repo: QuestsRepository,
        daily_status_repo: DailyStatusRepository,
        penalty_repo: PenaltyQuestsRepository,
        users_repo: UsersRepository,
        reward_service: RewardService,
        daily_reset_service: DailyResetService,
    ) -> None:
        """Initialize service.

        Args:
            pool: AsyncPG connection pool.
            state: Application state.
            quests_repo: Quests repository instance.
            daily_status_repo: Daily status repository instance.
            penalty_repo: Penalty completion ledger repository instance.
            users_repo: Users repository instance.
            reward_service: Reward engine.
            daily_reset_service: Daily reset tracker used to gate penalty completions.
        """
        super().__init__(pool, state)
        self._quests_repo = quests_repo
        self._daily_status_repo = daily_status_repo
        self._penalty_repo = penalty_repo
        self._users_repo = users_repo
        self._reward_service = reward_service
        self._daily_reset_service = daily_reset_service

    # ===== Generic CRUD =====

    async def _fetch_owned(
        self, kind: QuestKind, quest_id: int, user_id: int, *, conn: Connection | None = None
    ) -> dict:
        quest = await self._quests_repo.fetch_quest(kind, quest_id, conn=conn)
        if quest is None:
            raise QuestNotFoundError(kind, quest_id)
        if quest["created_by"] != user_id:
            raise NotQuestOwnerError(quest_id, user_id)
        return quest

    async def _create(self, kind: QuestKind, user_id: int, data: QuestCreateRequest) -> dict:
        fields = _clean_fields(msgspec.structs.asdict(data))
        try:
            quest = await self._quests_repo.create_quest(kind, user_id, fields)
        except ForeignKeyViolationError as e:
            raise UserNotFoundError(user_id) from e
        except CheckConstraintViolationError as e:
            raise QuestValidationError("Quest rewards are out of range", constraint=e.constraint_name) from e
        log.info("User %s created %s quest %s", user_id, kind, quest["id"])
        return quest

    async def _update(self, kind: QuestKind, quest_id: int, user_id: int, data: QuestUpdateRequest) -> dict:
        await self._fetch_owned(kind, quest_id, user_id)
        updates = {key: value for key, value in msgspec.structs.asdict(data).items() if value is not None}
        updates = _clean_fields(updates)
        try:
            quest = await self._quests_repo.update_quest(kind, quest_id, updates)
        except CheckConstraintViolationError as e:
            raise QuestValidationError("Quest rewards are out of range", constraint=e.constraint_name) from e
        if quest is None:
            raise QuestNotFoundError(kind, quest_id)
        return quest

    async def _delete(self, kind: QuestKind, quest_id: int, user_id: int) -> None:
        await self._fetch_owned(kind, quest_id, user_id)
        if not await self._quests_repo.delete_quest(kind, quest_id):
            raise QuestNotFoundError(kind, quest_id)
        log.info("User %s deleted %s quest %s", user_id, kind, quest_id)

    # ===== Daily quests =====

    async def list_daily_quests(self, user_id: int) -> list[DailyQuestResponse]:
        """List the user's daily quests, flagging those ticked off today.

        Args:
            user_id: Owner user ID.

        Returns:
            Daily quests, newest first.
        """
        rows = await self._quests_repo.fetch_quests("daily", user_id)
        status = await self._daily_status_repo.fetch_status(user_id, reset_key())
        completed = set(status["completed_quest_ids"]) if status else set()
        return [DailyQuestResponse(**row, is_completed=row["id"] in completed) for row in rows]

    async def create_daily_quest(self, user_id: int, data: DailyQuestCreateRequest) -> DailyQuestResponse:
        """Create a daily quest owned by the user."""
        return DailyQuestResponse(**await self._create("daily", user_id, data))

    async def update_daily_quest(
        self, quest_id: int, user_id: int, data: DailyQuestUpdateRequest
    ) -> DailyQuestResponse:
        """Update one of the user's daily quests.

        Raises:
            QuestNotFoundError: If the quest does not exist.
            NotQuestOwnerError: If the user does not own it.
        """
        return DailyQuestResponse(**await self._update("daily", quest_id, user_id, data))

    async def delete_daily_quest(self, quest_id: int, user_id: int) -> None:
        """Delete one of the user's daily quests."""
        await self._delete("daily", quest_id, user_id)

    # ===== Dungeon quests =====

    async def list_dungeon_quests(self, user_id: int) -> list[DungeonQuestResponse]:
        """List the user's dungeon quests, flagging those the user has cleared."""
        rows = await self._quests_repo.fetch_quests("dungeon", user_id)
        cleared = await self._quests_repo.fetch_completed_dungeon_ids(user_id)
        return [DungeonQuestResponse(**row, is_completed=row["id"] in cleared) for row in rows]

    async def create_dungeon_quest(self, user_id: int, data: DungeonQuestCreateRequest) -> DungeonQuestResponse:
        """Create a dungeon quest owned by the user."""
        return DungeonQuestResponse(**await self._create("dungeon", user_id, data))

    async def update_dungeon_quest(
        self, quest_id: int, user_id: int, data: DungeonQuestUpdateRequest
    ) -> DungeonQuestResponse:
        """Update one of the user's dungeon quests."""
        quest = await self._update("dungeon", quest_id, user_id, data)
        cleared = await self._quests_repo.fetch_completed_dungeon_ids(user_id)
        return DungeonQuestResponse(**quest, is_completed=quest_id in cleared)

    async def delete_dungeon_quest(self, quest_id: int, user_id: int) -> None:
        """Delete one of the user's dungeon quests."""
        await self._delete("dungeon", quest_id, user_id)

    async def complete_dungeon_quest(self, user_id: int, quest_id: int) -> DungeonCompletionResponse:
        """Clear a dungeon quest and credit its rewards.

        Dungeon quests form a shared pool: any user may clear any quest, once.

        Args:
            user_id: User clearing the quest.
            quest_id: Dungeon quest ID.

        Returns:
            The quest and the user's updated profile.

        Raises:
            QuestNotFoundError: If the quest does not exist.
            UserNotFoundError: If the user does not exist.
            DungeonAlreadyCompletedError: If the user already cleared the quest.
        """
        async with self._pool.acquire() as conn, conn.transaction():
            quest = await self._quests_repo.fetch_quest("dungeon", quest_id, conn=conn)
            if quest is None:
                raise QuestNotFoundError("dungeon", quest_id)
            if await self._users_repo.fetch_user(user_id, conn=conn) is None:
                raise UserNotFoundError(user_id)

            try:
                await self._quests_repo.insert_dungeon_completion(quest_id, user_id, conn=conn)
            except UniqueConstraintViolationError as e:
                log.info("Rejected dungeon quest %s for user %s: already cleared", quest_id, user_id)
                raise DungeonAlreadyCompletedError(quest_id) from e

            profile = await self._reward_service.credit_dungeon_completion(user_id, quest, conn=conn)

        log.info(
            "User %s cleared dungeon quest %s: +%s XP, +%s coins, title %r",
            user_id,
            quest_id,
            quest["xp"],
            quest["coins"],
            quest["title"],
        )
        return DungeonCompletionResponse(
            quest=DungeonQuestResponse(**quest, is_completed=True),
            updated_profile=profile,
        )

    # ===== Penalty quests =====

    async def list_penalty_quests(self, user_id: int) -> list[PenaltyQuestResponse]:
        """List the user's penalty quests with today's completion state."""
        rows = await self._quests_repo.fetch_quests("penalty", user_id)
        completed = await self._penalty_repo.fetch_completions_for_date(user_id, reset_key())
        return [
            PenaltyQuestResponse(
                **row,
                is_completed_today=row["id"] in completed,
                last_completed_at=completed.get(row["id"]),
            )
            for row in rows
        ]

    async def create_penalty_quest(self, user_id: int, data: PenaltyQuestCreateRequest) -> PenaltyQuestResponse:
        """Create a penalty quest owned by the user."""
        return PenaltyQuestResponse(**await self._create("penalty", user_id, data))

    async def update_penalty_quest(
        self, quest_id: int, user_id: int, data: PenaltyQuestUpdateRequest
    ) -> PenaltyQuestResponse:
        """Update one of the user's penalty quests."""
        return PenaltyQuestResponse(**await self._update("penalty", quest_id, user_id, data))

    async def delete_penalty_quest(self, quest_id: int, user_id: int) -> None:
        """Delete one of the user's penalty quests."""
        await self._delete("penalty", quest_id, user_id)

    async def accept_penalty_quest(self, user_id: int, quest_id: int) -> PenaltyAcceptResponse:
        """Complete one of the user's penalty quests for today and credit its XP.

        Args:
            user_id: User completing the quest.
            quest_id: Penalty quest ID.

        Returns:
            The quest, XP awarded, new totals and when the quest is available again.

        Raises:
            QuestNotFoundError: If the quest does not exist.
            NotQuestOwnerError: If the user does not own the quest.
            AlreadyCompletedTodayError: If the quest was already completed today.
        """
        async with self._pool.acquire() as conn, conn.transaction():
            quest = await self._fetch_owned("penalty", quest_id, user_id, conn=conn)
            completion = await self._daily_reset_service.record_penalty_completion(user_id, quest_id, conn=conn)
            reward = await self._reward_service.credit_penalty_completion(user_id, quest, conn=conn)

        log.info(
            "User %s completed penalty quest %s: +%s XP (skill updated: %s)",
            user_id,
            quest_id,
            quest["xp"],
            reward.skill_updated,
        )
        return PenaltyAcceptResponse(
            quest=PenaltyQuestResponse(**quest, is_completed_today=True, last_completed_at=completion["completed_at"]),
            xp_awarded=quest["xp"],
            total_xp=reward.total_xp,
            level=reward.level,
            completed_today=True,
            next_available=next_reset_at(),
            skill_updated=reward.skill_updated,
        )
