"""User routes: profile, purchases, inventory, titles and daily quest status."""

from __future__ import annotations

from typing import Annotated

import litestar
from litestar import Request
from litestar.datastructures import State
from litestar.di import Provide
from litestar.params import Body
from litestar.status_codes import HTTP_200_OK, HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND
from shadow_sdk.daily import (
    CompleteDailyQuestsRequest,
    CompleteDailyQuestsResponse,
    DailyQuestStatusResponse,
    ToggleQuestRequest,
    ToggleQuestResponse,
)
from shadow_sdk.shop import (
    InventoryDeleteResponse,
    InventoryItemResponse,
    PurchaseRequest,
    PurchaseResponse,
)
from shadow_sdk.users import ProfileResponse, ProfileUpdateRequest, ProfileUpdateResponse, TitleDeleteResponse

from middleware.auth import AuthToken, AuthUser
from routes.dependencies import QUEST_DEPENDENCIES, provide_shop_repository, provide_users_service
from services.daily_reset_service import DailyResetService
from services.exceptions.common import AlreadyCompletedError, NotFoundError, ValidationError
from services.users_service import UsersService
from utilities.errors import CustomHTTPException


class UserController(litestar.Controller):
    """Everything scoped to the authenticated user."""

    tags = ["User"]
    path = "/user"
    dependencies = {
        **QUEST_DEPENDENCIES,
        "shop_repo": Provide(provide_shop_repository),
        "users_service": Provide(provide_users_service),
    }

    # ===== Profile =====

    @litestar.get(
        path="/profile",
        summary="Get Profile",
        description="Totals, level, achievements, titles, skill XP and quest statistics.",
    )
    async def get_profile(
        self,
        users_service: UsersService,
        request: Request[AuthUser, AuthToken, State],
    ) -> ProfileResponse:
        """Get the caller's profile."""
        try:
            return await users_service.get_profile(request.user.id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    @litestar.put(
        path="/profile",
        summary="Update Profile",
        description="Editor mode: overwrite total XP and/or coins.",
    )
    async def update_profile(
        self,
        users_service: UsersService,
        request: Request[AuthUser, AuthToken, State],
        data: Annotated[ProfileUpdateRequest, Body(title="Profile totals")],
    ) -> ProfileUpdateResponse:
        """Overwrite the caller's totals."""
        try:
            return await users_service.update_profile(request.user.id, data)
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    @litestar.delete(
        path="/titles/{title_name:str}",
        summary="Delete Title",
        description="Remove a title from the caller.",
        status_code=HTTP_200_OK,
    )
    async def delete_title(
        self,
        users_service: UsersService,
        request: Request[AuthUser, AuthToken, State],
        title_name: str,
    ) -> TitleDeleteResponse:
        """Remove one of the caller's titles."""
        try:
            return await users_service.delete_title(request.user.id, title_name)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    # ===== Purchases and inventory =====

    @litestar.post(
        path="/purchase",
        summary="Purchase Item",
        description="Buy an active shop item with coins.",
        status_code=HTTP_200_OK,
    )
    async def purchase_item(
        self,
        users_service: UsersService,
        request: Request[AuthUser, AuthToken, State],
        data: Annotated[PurchaseRequest, Body(title="Item to buy")],
    ) -> PurchaseResponse:
        """Buy a shop item.

        Raises:
            CustomHTTPException: 404 if the item is missing or inactive, 400 if the caller cannot afford it.
        """
        try:
            return await users_service.purchase_item(request.user.id, data.item_id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e

    @litestar.get(path="/inventory", summary="Get Inventory", description="List the caller's purchased items.")
    async def list_inventory(
        self,
        users_service: UsersService,
        request: Request[AuthUser, AuthToken, State],
    ) -> list[InventoryItemResponse]:
        """List the caller's inventory, newest first."""
        return await users_service.list_inventory(request.user.id)

    @litestar.patch(
        path="/inventory/{item_id:int}/use",
        summary="Use Inventory Item",
        description="Mark an inventory item as used.",
    )
    async def use_inventory_item(
        self,
        users_service: UsersService,
        request: Request[AuthUser, AuthToken, State],
        item_id: int,
    ) -> InventoryItemResponse:
        """Mark one of the caller's inventory items as used."""
        try:
            return await users_service.use_inventory_item(request.user.id, item_id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e

    @litestar.delete(
        path="/inventory/{item_id:int}",
        summary="Delete Inventory Item",
        description="Remove an item from the caller's inventory.",
        status_code=HTTP_200_OK,
    )
    async def delete_inventory_item(
        self,
        users_service: UsersService,
        request: Request[AuthUser, AuthToken, State],
        item_id: int,
    ) -> InventoryDeleteResponse:
        """Remove one of the caller's inventory items."""
        try:
            return await users_service.delete_inventory_item(request.user.id, item_id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    # ===== Daily quest status =====

    @litestar.get(
        path="/daily-quest-status",
        summary="Daily Quest Status",
        description="Quests ticked off in the current reset period and whether the day is finished.",
    )
    async def get_daily_quest_status(
        self,
        daily_reset_service: DailyResetService,
        request: Request[AuthUser, AuthToken, State],
    ) -> DailyQuestStatusResponse:
        """Get the caller's daily quest status."""
        try:
            return await daily_reset_service.get_status(request.user.id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    @litestar.post(
        path="/toggle-quest-completion",
        summary="Toggle Daily Quest",
        description="Tick a daily quest off for today, or untick it.",
        status_code=HTTP_200_OK,
    )
    async def toggle_quest_completion(
        self,
        daily_reset_service: DailyResetService,
        request: Request[AuthUser, AuthToken, State],
        data: Annotated[ToggleQuestRequest, Body(title="Quest to toggle")],
    ) -> ToggleQuestResponse:
        """Toggle a daily quest.

        Raises:
            CustomHTTPException: 400 if the day is already finished.
        """
        try:
            return await daily_reset_service.toggle_quest_completion(request.user.id, data.quest_id)
        except AlreadyCompletedError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    @litestar.post(
        path="/complete-daily-quests",
        summary="Finish Day",
        description="Finish the day and collect XP, coins and skill XP for the completed quests.",
        status_code=HTTP_200_OK,
    )
    async def complete_daily_quests(
        self,
        daily_reset_service: DailyResetService,
        request: Request[AuthUser, AuthToken, State],
        data: Annotated[CompleteDailyQuestsRequest, Body(title="Completed quests and rewards")],
    ) -> CompleteDailyQuestsResponse:
        """Finish the day.

        Raises:
            CustomHTTPException: 400 if no quests were given or the day is already finished.
        """
        try:
            return await daily_reset_service.finish_day(
                request.user.id,
                data.completed_quest_ids,
                data.total_xp,
                data.total_coins,
                data.skill_xp_updates,
            )
        except (ValidationError, AlreadyCompletedError) as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
