"""Daily reset tracker: per-day quest status, day finishing and penalty gating."""

from __future__ import annotations

import datetime as dt
import logging

from asyncpg import Connection, Pool
from litestar.datastructures import State
from shadow_sdk.daily import CompleteDailyQuestsResponse, DailyQuestStatusResponse, ToggleQuestResponse

from repository.daily_status_repository import DailyStatusRepository
from repository.exceptions import ForeignKeyViolationError, UniqueConstraintViolationError
from repository.penalty_quests_repository import PenaltyQuestsRepository
from repository.users_repository import UsersRepository
from services.base import BaseService
from services.exceptions.quests import (
    AlreadyCompletedTodayError,
    AlreadyFinishedError,
    NoQuestsSelectedError,
    QuestNotFoundError,
    QuestValidationError,
)
from services.exceptions.users import UserNotFoundError
from services.reward_service import RewardService
from utilities.reset_period import reset_key

log = logging.getLogger(__name__)


class DailyResetService(BaseService):
    """Tracks what each user completed in the current reset period.

    Daily quests and penalty quests share one reset key, the server-local date.
    A day, once finished, is immutable until the key rolls over.
    """

    def __init__(
        self,
        pool: Pool,
        state: State,
        daily_status_repo: DailyStatusRepository,
        penalty_repo: PenaltyQuestsRepository,
        users_repo: UsersRepository,
        reward_service: RewardService,
    ) -> None:
        """Initialize service.

        Args:
            pool: AsyncPG connection pool.
            state: Application state.
            daily_status_repo: Daily status repository instance.
            penalty_repo: Penalty completion ledger repository instance.
            users_repo: Users repository instance.
            reward_service: Reward engine used to credit finished days.
        """
        super().__init__(pool, state)
        self._daily_status_repo = daily_status_repo
        self._penalty_repo = penalty_repo
        self._users_repo = users_repo
        self._reward_service = reward_service

    async def get_status(self, user_id: int) -> DailyQuestStatusResponse:
        """Get the user's daily quest status for the current period.

        Reading never writes. A period with no stored row reports an empty set.

        Args:
            user_id: User ID.

        Returns:
            Completed quest IDs, finished flag, stored key and current key.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        today = reset_key()
        row = await self._daily_status_repo.fetch_status(user_id, today)
        if row is None:
            if await self._users_repo.fetch_user(user_id) is None:
                raise UserNotFoundError(user_id)
            return DailyQuestStatusResponse(
                completed_quests=[],
                finished_today=False,
                last_reset_date=today,
                current_date=today,
            )
        return DailyQuestStatusResponse(
            completed_quests=list(row["completed_quest_ids"]),
            finished_today=row["finished_today"],
            last_reset_date=row["reset_date"],
            current_date=today,
        )

    async def toggle_quest_completion(self, user_id: int, quest_id: int) -> ToggleQuestResponse:
        """Add a quest to today's completed set, or remove it if present.

        Quest IDs are treated as opaque and are not checked against stored quests.

        Args:
            user_id: User ID.
            quest_id: Quest to toggle.

        Returns:
            The completed set after the toggle and whether the quest is now in it.

        Raises:
            AlreadyFinishedError: If the day was already finished.
            UserNotFoundError: If the user does not exist.
        """
        today = reset_key()
        try:
            row = await self._daily_status_repo.toggle_quest(user_id, today, quest_id)
        except ForeignKeyViolationError as e:
            raise UserNotFoundError(user_id) from e
        if row is None:
            log.info("Rejected toggle of quest %s for user %s: day %s already finished", quest_id, user_id, today)
            raise AlreadyFinishedError(today)

        completed = list(row["completed_quest_ids"])
        return ToggleQuestResponse(
            completed_quests=completed,
            finished_today=row["finished_today"],
            quest_id=quest_id,
            is_completed=quest_id in completed,
        )

    async def finish_day(
        self,
        user_id: int,
        quest_ids: list[int],
        total_xp: int,
        total_coins: int,
        skill_xp_updates: dict[str, int],
    ) -> CompleteDailyQuestsResponse:
        """Finish the day and credit its rewards in one transaction.

        Either the day is marked finished and every reward is credited, or
        nothing is written.

        Args:
            user_id: User ID.
            quest_ids: Quests completed today.
            total_xp: XP to credit.
            total_coins: Coins to credit.
            skill_xp_updates: XP to credit per skill name.

        Returns:
            User totals after crediting plus what this call added.

        Raises:
            NoQuestsSelectedError: If ``quest_ids`` is empty.
            QuestValidationError: If the reward data is unusable.
            AlreadyFinishedError: If the day was already finished.
            UserNotFoundError: If the user does not exist.
        """
        if not quest_ids:
            raise NoQuestsSelectedError()
        if total_xp <= 0 or total_coins <= 0:
            raise QuestValidationError("Missing reward data", total_xp=total_xp, total_coins=total_coins)

        skill_updates = {}
        for name, delta in skill_xp_updates.items():
            if not name.strip():
                raise QuestValidationError("Skill names cannot be empty")
            if delta < 0:
                raise QuestValidationError("Skill XP must be 0 or greater", skill=name)
            skill_updates[name.strip()] = skill_updates.get(name.strip(), 0) + delta

        quest_ids = list(dict.fromkeys(quest_ids))
        today = reset_key()

        async with self._pool.acquire() as conn, conn.transaction():
            try:
                row = await self._daily_status_repo.finish_day(user_id, today, quest_ids, conn=conn)
            except ForeignKeyViolationError as e:
                raise UserNotFoundError(user_id) from e
            if row is None:
                log.info("Rejected finish for user %s: day %s already finished", user_id, today)
                raise AlreadyFinishedError(today)

            result = await self._reward_service.credit_daily_batch(
                user_id,
                total_xp,
                total_coins,
                skill_updates,
                conn=conn,
            )

        log.info(
            "User %s finished day %s with %s quest(s): +%s XP, +%s coins",
            user_id,
            today,
            len(quest_ids),
            total_xp,
            total_coins,
        )
        return CompleteDailyQuestsResponse(
            total_xp=result.total_xp,
            coins=result.coins,
            skill_xp=result.skill_xp,
            added_xp=total_xp,
            added_coins=total_coins,
            skill_xp_updates=skill_updates,
            completion_date=today,
        )

    async def can_complete_penalty_quest(
        self,
        user_id: int,
        quest_id: int,
        *,
        reset_date: dt.date | None = None,
        conn: Connection | None = None,
    ) -> bool:
        """Check whether the user may complete a penalty quest in the current period.

        Args:
            user_id: User ID.
            quest_id: Penalty quest ID.
            reset_date: Reset key to check. Defaults to the current key.
            conn: Optional connection for transaction support.

        Returns:
            True when no completion exists for the quest, user and key.
        """
        reset_date = reset_date or reset_key()
        return not await self._penalty_repo.has_completion(quest_id, user_id, reset_date, conn=conn)

    async def record_penalty_completion(self, user_id: int, quest_id: int, *, conn: Connection) -> dict:
        """Record a penalty completion for the current period.

        The ledger's unique constraint is the final arbiter. A concurrent
        duplicate that slips past the pre-check is rejected the same way.

        Args:
            user_id: User ID.
            quest_id: Penalty quest ID.
            conn: Connection inside the caller's transaction.

        Returns:
            The ledger row.

        Raises:
            AlreadyCompletedTodayError: If the quest was already completed in this period.
            QuestNotFoundError: If the quest was deleted before the completion was stored.
            UserNotFoundError: If the user does not exist.
        """
        today = reset_key()
        if not await self.can_complete_penalty_quest(user_id, quest_id, reset_date=today, conn=conn):
            log.info("Rejected penalty quest %s for user %s: already completed on %s", quest_id, user_id, today)
            raise AlreadyCompletedTodayError(quest_id, today)
        try:
            return await self._penalty_repo.insert_completion(quest_id, user_id, today, conn=conn)
        except UniqueConstraintViolationError as e:
            log.warning("Concurrent penalty completion of quest %s by user %s on %s", quest_id, user_id, today)
            raise AlreadyCompletedTodayError(quest_id, today) from e
        except ForeignKeyViolationError as e:
            if e.constraint_name == "penalty_completions_user_id_fkey":
                raise UserNotFoundError(user_id) from e
            raise QuestNotFoundError("penalty", quest_id) from e

    async def cleanup_penalty_completions(self) -> int:
        """Delete penalty ledger rows older than yesterday.

        Returns:
            Number of rows deleted.
        """
        cutoff = reset_key() - dt.timedelta(days=1)
        deleted = await self._penalty_repo.delete_completions_before(cutoff)
        log.info("Removed %s penalty completion(s) keyed before %s", deleted, cutoff)
        return deleted
