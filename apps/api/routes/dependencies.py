"""Dependency providers shared by the API controllers.

Each request gets fresh repositories bound to the application pool and fresh
services built on top of them.
"""

from __future__ import annotations

from litestar.datastructures import State
from litestar.di import Provide

from repository.auth_repository import AuthRepository
from repository.daily_rewards_repository import DailyRewardsRepository
from repository.daily_status_repository import DailyStatusRepository
from repository.penalty_quests_repository import PenaltyQuestsRepository
from repository.quests_repository import QuestsRepository
from repository.shop_repository import ShopRepository
from repository.skills_repository import SkillsRepository
from repository.users_repository import UsersRepository
from services.auth_service import AuthService
from services.daily_reset_service import DailyResetService
from services.daily_rewards_service import DailyRewardsService
from services.quests_service import QuestsService
from services.reward_service import RewardService
from services.shop_service import ShopService
from services.skills_service import SkillsService
from services.users_service import UsersService

# ===== Repositories =====


async def provide_auth_repository(state: State) -> AuthRepository:
    """Provide auth repository."""
    return AuthRepository(pool=state.db_pool)


async def provide_users_repository(state: State) -> UsersRepository:
    """Provide users repository."""
    return UsersRepository(pool=state.db_pool)


async def provide_skills_repository(state: State) -> SkillsRepository:
    """Provide skills repository."""
    return SkillsRepository(pool=state.db_pool)


async def provide_quests_repository(state: State) -> QuestsRepository:
    """Provide quests repository."""
    return QuestsRepository(pool=state.db_pool)


async def provide_daily_status_repository(state: State) -> DailyStatusRepository:
    """Provide daily status repository."""
    return DailyStatusRepository(pool=state.db_pool)


async def provide_penalty_quests_repository(state: State) -> PenaltyQuestsRepository:
    """Provide penalty completion ledger repository."""
    return PenaltyQuestsRepository(pool=state.db_pool)


async def provide_shop_repository(state: State) -> ShopRepository:
    """Provide shop repository."""
    return ShopRepository(pool=state.db_pool)


async def provide_daily_rewards_repository(state: State) -> DailyRewardsRepository:
    """Provide daily rewards repository."""
    return DailyRewardsRepository(pool=state.db_pool)


# ===== Services =====


async def provide_auth_service(state: State, auth_repo: AuthRepository) -> AuthService:
    """Provide auth service."""
    return AuthService(pool=state.db_pool, state=state, auth_repo=auth_repo)


async def provide_reward_service(
    state: State,
    users_repo: UsersRepository,
    skills_repo: SkillsRepository,
) -> RewardService:
    """Provide the reward engine."""
    return RewardService(pool=state.db_pool, state=state, users_repo=users_repo, skills_repo=skills_repo)


async def provide_daily_reset_service(
    state: State,
    daily_status_repo: DailyStatusRepository,
    penalty_repo: PenaltyQuestsRepository,
    users_repo: UsersRepository,
    reward_service: RewardService,
) -> DailyResetService:
    """Provide the daily reset tracker."""
    return DailyResetService(
        pool=state.db_pool,
        state=state,
        daily_status_repo=daily_status_repo,
        penalty_repo=penalty_repo,
        users_repo=users_repo,
        reward_service=reward_service,
    )


async def provide_quests_service(  # noqa: PLR0913
    state: State,
    quests_repo: QuestsRepository,
    daily_status_repo: DailyStatusRepository,
    penalty_repo: PenaltyQuestsRepository,
    users_repo: UsersRepository,
    reward_service: RewardService,
    daily_reset_service: DailyResetService,
) -> QuestsService:
    """Provide quests service."""
    return QuestsService(
        pool=state.db_pool,
        state=state,
        quests_repo=quests_repo,
        daily_status_repo=daily_status_repo,
        penalty_repo=penalty_repo,
        users_repo=users_repo,
        reward_service=reward_service,
        daily_reset_service=daily_reset_service,
    )


async def provide_skills_service(state: State, skills_repo: SkillsRepository) -> SkillsService:
    """Provide skills service."""
    return SkillsService(pool=state.db_pool, state=state, skills_repo=skills_repo)


async def provide_shop_service(state: State, shop_repo: ShopRepository) -> ShopService:
    """Provide shop service."""
    return ShopService(pool=state.db_pool, state=state, shop_repo=shop_repo)


async def provide_users_service(
    state: State,
    users_repo: UsersRepository,
    shop_repo: ShopRepository,
    skills_repo: SkillsRepository,
) -> UsersService:
    """Provide users service."""
    return UsersService(
        pool=state.db_pool,
        state=state,
        users_repo=users_repo,
        shop_repo=shop_repo,
        skills_repo=skills_repo,
    )


async def provide_daily_rewards_service(state: State, rewards_repo: DailyRewardsRepository) -> DailyRewardsService:
    """Provide daily rewards service."""
    return DailyRewardsService(pool=state.db_pool, state=state, rewards_repo=rewards_repo)


# Everything the quest and daily reset services need, ready for a controller's ``dependencies``.
QUEST_DEPENDENCIES = {
    "users_repo": Provide(provide_users_repository),
    "skills_repo": Provide(provide_skills_repository),
    "quests_repo": Provide(provide_quests_repository),
    "daily_status_repo": Provide(provide_daily_status_repository),
    "penalty_repo": Provide(provide_penalty_quests_repository),
    "reward_service": Provide(provide_reward_service),
    "daily_reset_service": Provide(provide_daily_reset_service),
    "quests_service": Provide(provide_quests_service),
}
