"""Reward engine: credits XP, coins, skill XP and titles.

Every method runs on a connection that is already inside the caller's
transaction and performs no duplicate checks. Callers gate first.
"""

from __future__ import annotations

import logging

import msgspec
from asyncpg import Connection, Pool
from litestar.datastructures import State
from shadow_sdk.quests import SkillProgress, UpdatedProfile
from shadow_sdk.utilities import user_rank

from repository.exceptions import NumericOutOfRangeError
from repository.skills_repository import SkillsRepository
from repository.users_repository import UsersRepository
from services.base import BaseService
from services.exceptions.users import TotalsOutOfRangeError, UserNotFoundError

log = logging.getLogger(__name__)


class DailyBatchResult(msgspec.Struct):
    """User totals after a daily batch was credited.

    Attributes:
        total_xp: User total XP.
        coins: User coin balance.
        skill_xp: XP per skill name, read back from the skills table.
    """

    total_xp: int
    coins: int
    skill_xp: dict[str, int]


class PenaltyRewardResult(msgspec.Struct):
    """User state after a penalty completion was credited.

    Attributes:
        total_xp: User total XP.
        level: Derived user level.
        skill_updated: Whether an existing skill received the XP.
        skill_progress: The matching skill after crediting, if any.
    """

    total_xp: int
    level: int
    skill_updated: bool
    skill_progress: SkillProgress | None = None


class RewardService(BaseService):
    """Applies quest rewards to user totals, skills and titles."""

    def __init__(
        self,
        pool: Pool,
        state: State,
        users_repo: UsersRepository,
        skills_repo: SkillsRepository,
    ) -> None:
        """Initialize service.

        Args:
            pool: AsyncPG connection pool.
            state: Application state.
            users_repo: Users repository instance.
            skills_repo: Skills repository instance.
        """
        super().__init__(pool, state)
        self._users_repo = users_repo
        self._skills_repo = skills_repo

    async def _add_totals(self, user_id: int, xp: int, coins: int, *, conn: Connection) -> dict:
        try:
            totals = await self._users_repo.add_rewards(user_id, xp, coins, conn=conn)
        except NumericOutOfRangeError as e:
            raise TotalsOutOfRangeError(user_id) from e
        if totals is None:
            raise UserNotFoundError(user_id)
        return totals

    async def credit_daily_batch(
        self,
        user_id: int,
        total_xp: int,
        total_coins: int,
        skill_xp_updates: dict[str, int],
        *,
        conn: Connection,
    ) -> DailyBatchResult:
        """Credit the rewards of a finished day.

        Skills are matched by name ignoring case and created when absent.

        Args:
            user_id: User to credit.
            total_xp: XP to add to the user total.
            total_coins: Coins to add.
            skill_xp_updates: XP to add per skill name.
            conn: Connection inside the caller's transaction.

        Returns:
            User totals and the resulting skill XP map.

        Raises:
            UserNotFoundError: If the user does not exist.
            TotalsOutOfRangeError: If a credit would leave the stored range.
        """
        totals = await self._add_totals(user_id, total_xp, total_coins, conn=conn)
        try:
            for skill, delta in skill_xp_updates.items():
                await self._skills_repo.upsert_skill_xp(user_id, skill, delta, conn=conn)
        except NumericOutOfRangeError as e:
            raise TotalsOutOfRangeError(user_id) from e
        skill_xp = await self._skills_repo.fetch_skill_xp_map(user_id, conn=conn)
        return DailyBatchResult(total_xp=totals["total_xp"], coins=totals["coins"], skill_xp=skill_xp)

    async def credit_dungeon_completion(self, user_id: int, quest: dict, *, conn: Connection) -> UpdatedProfile:
        """Credit a cleared dungeon quest.

        Adds the quest XP and coins, grants the quest title unless the user
        already holds it, and adds the XP to the quest skill, creating it if needed.

        Args:
            user_id: User to credit.
            quest: Dungeon quest row.
            conn: Connection inside the caller's transaction.

        Returns:
            The user's updated profile.

        Raises:
            UserNotFoundError: If the user does not exist.
            TotalsOutOfRangeError: If a credit would leave the stored range.
        """
        totals = await self._add_totals(user_id, quest["xp"], quest["coins"], conn=conn)
        title_awarded = await self._users_repo.insert_title(user_id, quest["title"], "dungeon_quest", conn=conn)
        try:
            skill = await self._skills_repo.upsert_skill_xp(user_id, quest["skill"], quest["xp"], conn=conn)
        except NumericOutOfRangeError as e:
            raise TotalsOutOfRangeError(user_id) from e
        return UpdatedProfile(
            total_xp=totals["total_xp"],
            coins=totals["coins"],
            new_title=quest["title"],
            title_awarded=title_awarded,
            skill_progress=SkillProgress(skill=skill["name"], new_xp=skill["xp"]),
        )

    async def credit_penalty_completion(self, user_id: int, quest: dict, *, conn: Connection) -> PenaltyRewardResult:
        """Credit a completed penalty quest.

        Adds XP only, never coins. The quest skill receives the XP only if the
        user already has it; a missing skill is not created.

        Args:
            user_id: User to credit.
            quest: Penalty quest row.
            conn: Connection inside the caller's transaction.

        Returns:
            The user's total XP, level and whether a skill was updated.

        Raises:
            UserNotFoundError: If the user does not exist.
            TotalsOutOfRangeError: If a credit would leave the stored range.
        """
        totals = await self._add_totals(user_id, quest["xp"], 0, conn=conn)
        try:
            skill = await self._skills_repo.add_skill_xp(user_id, quest["skill"], quest["xp"], conn=conn)
        except NumericOutOfRangeError as e:
            raise TotalsOutOfRangeError(user_id) from e
        if skill is None:
            log.debug("User %s has no skill %r, penalty XP credited to total only", user_id, quest["skill"])
        return PenaltyRewardResult(
            total_xp=totals["total_xp"],
            level=user_rank(totals["total_xp"]),
            skill_updated=skill is not None,
            skill_progress=SkillProgress(skill=skill["name"], new_xp=skill["xp"]) if skill else None,
        )
