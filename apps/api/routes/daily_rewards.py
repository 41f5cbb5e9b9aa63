"""Daily reward routes."""

from __future__ import annotations

from typing import Annotated

import litestar
from litestar import Request
from litestar.datastructures import State
from litestar.di import Provide
from litestar.params import Body
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND
from shadow_sdk.rewards import DailyRewardCreateRequest, DailyRewardResponse

from middleware.auth import AuthToken, AuthUser
from routes.dependencies import provide_daily_rewards_repository, provide_daily_rewards_service
from services.daily_rewards_service import DailyRewardsService
from services.exceptions.common import ForbiddenError, NotFoundError, ValidationError
from utilities.errors import CustomHTTPException


class DailyRewardsController(litestar.Controller):
    """Rewards the caller grants themself for finishing a day."""

    tags = ["Daily Rewards"]
    path = "/daily-rewards"
    dependencies = {
        "rewards_repo": Provide(provide_daily_rewards_repository),
        "daily_rewards_service": Provide(provide_daily_rewards_service),
    }

    @litestar.get(path="/", summary="List Daily Rewards", description="List the caller's daily rewards.")
    async def list_rewards(
        self,
        daily_rewards_service: DailyRewardsService,
        request: Request[AuthUser, AuthToken, State],
    ) -> list[DailyRewardResponse]:
        """List the caller's daily rewards."""
        return await daily_rewards_service.list_rewards(request.user.id)

    @litestar.post(path="/", summary="Create Daily Reward", description="Create a daily reward.")
    async def create_reward(
        self,
        daily_rewards_service: DailyRewardsService,
        request: Request[AuthUser, AuthToken, State],
        data: Annotated[DailyRewardCreateRequest, Body(title="Daily reward")],
    ) -> DailyRewardResponse:
        """Create a daily reward owned by the caller."""
        try:
            return await daily_rewards_service.create_reward(request.user.id, data)
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    @litestar.delete(path="/{reward_id:int}", summary="Delete Daily Reward", description="Delete a daily reward.")
    async def delete_reward(
        self,
        daily_rewards_service: DailyRewardsService,
        request: Request[AuthUser, AuthToken, State],
        reward_id: int,
    ) -> None:
        """Delete one of the caller's daily rewards."""
        try:
            await daily_rewards_service.delete_reward(reward_id, request.user.id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ForbiddenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_403_FORBIDDEN) from e
