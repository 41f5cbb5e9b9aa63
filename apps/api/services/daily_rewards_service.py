"""Service layer for daily rewards."""

from __future__ import annotations

from asyncpg import Pool
from litestar.datastructures import State
from shadow_sdk.rewards import DailyRewardCreateRequest, DailyRewardResponse

from repository.daily_rewards_repository import DailyRewardsRepository
from repository.exceptions import ForeignKeyViolationError
from services.base import BaseService
from services.exceptions.common import NotOwnerError
from services.exceptions.rewards import DailyRewardNotFoundError, RewardValidationError
from services.exceptions.users import UserNotFoundError


class DailyRewardsService(BaseService):
    """Service for the rewards a user promises themself for a finished day."""

    def __init__(self, pool: Pool, state: State, rewards_repo: DailyRewardsRepository) -> None:
        """Initialize service.

        Args:
            pool: AsyncPG connection pool.
            state: Application state.
            rewards_repo: Daily rewards repository instance.
        """
        super().__init__(pool, state)
        self._rewards_repo = rewards_repo

    async def list_rewards(self, user_id: int) -> list[DailyRewardResponse]:
        """List the user's daily rewards, newest first."""
        rows = await self._rewards_repo.fetch_rewards(user_id)
        return [DailyRewardResponse(**row) for row in rows]

    async def create_reward(self, user_id: int, data: DailyRewardCreateRequest) -> DailyRewardResponse:
        """Create a daily reward.

        Raises:
            RewardValidationError: If the trimmed name or description is too short.
        """
        name, description = data.name.strip(), data.description.strip()
        if len(name) < 3 or len(description) < 5:
            raise RewardValidationError("Please provide all required fields: name, description")
        try:
            row = await self._rewards_repo.create_reward(user_id, name, description)
        except ForeignKeyViolationError as e:
            raise UserNotFoundError(user_id) from e
        return DailyRewardResponse(**row)

    async def delete_reward(self, reward_id: int, user_id: int) -> None:
        """Delete one of the user's daily rewards.

        Raises:
            DailyRewardNotFoundError: If the reward does not exist.
            NotOwnerError: If the user does not own it.
        """
        reward = await self._rewards_repo.fetch_reward(reward_id)
        if reward is None:
            raise DailyRewardNotFoundError(reward_id)
        if reward["created_by"] != user_id:
            raise NotOwnerError("reward", reward_id, user_id)
        if not await self._rewards_repo.delete_reward(reward_id):
            raise DailyRewardNotFoundError(reward_id)
