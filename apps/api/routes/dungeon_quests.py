"""Dungeon quest routes."""

from __future__ import annotations

from typing import Annotated

import litestar
from litestar import Request
from litestar.datastructures import State
from litestar.params import Body
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND
from shadow_sdk.quests import (
    DungeonCompletionResponse,
    DungeonQuestCreateRequest,
    DungeonQuestResponse,
    DungeonQuestUpdateRequest,
)

from middleware.auth import AuthToken, AuthUser
from routes.dependencies import QUEST_DEPENDENCIES
from services.exceptions.common import AlreadyCompletedError, ForbiddenError, NotFoundError, ValidationError
from services.quests_service import QuestsService
from utilities.errors import CustomHTTPException


class DungeonQuestsController(litestar.Controller):
    """CRUD and completion for dungeon quests."""

    tags = ["Dungeon Quests"]
    path = "/dungeon-quests"
    dependencies = QUEST_DEPENDENCIES

    @litestar.get(path="/", summary="List Dungeon Quests", description="List the caller's dungeon quests.")
    async def list_dungeon_quests(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
    ) -> list[DungeonQuestResponse]:
        """List the caller's dungeon quests with the caller's completion flag."""
        return await quests_service.list_dungeon_quests(request.user.id)

    @litestar.post(path="/", summary="Create Dungeon Quest", description="Create a dungeon quest.")
    async def create_dungeon_quest(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
        data: Annotated[DungeonQuestCreateRequest, Body(title="Dungeon quest")],
    ) -> DungeonQuestResponse:
        """Create a dungeon quest owned by the caller."""
        try:
            return await quests_service.create_dungeon_quest(request.user.id, data)
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    @litestar.put(path="/{quest_id:int}", summary="Update Dungeon Quest", description="Update a dungeon quest.")
    async def update_dungeon_quest(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
        quest_id: int,
        data: Annotated[DungeonQuestUpdateRequest, Body(title="Dungeon quest changes")],
    ) -> DungeonQuestResponse:
        """Update one of the caller's dungeon quests."""
        try:
            return await quests_service.update_dungeon_quest(quest_id, request.user.id, data)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ForbiddenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_403_FORBIDDEN) from e
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e

    @litestar.delete(path="/{quest_id:int}", summary="Delete Dungeon Quest", description="Delete a dungeon quest.")
    async def delete_dungeon_quest(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
        quest_id: int,
    ) -> None:
        """Delete one of the caller's dungeon quests."""
        try:
            await quests_service.delete_dungeon_quest(quest_id, request.user.id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ForbiddenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_403_FORBIDDEN) from e

    @litestar.patch(
        path="/{quest_id:int}/complete",
        summary="Complete Dungeon Quest",
        description="Clear a dungeon quest and collect its XP, coins and title. Any user may clear any quest once.",
    )
    async def complete_dungeon_quest(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
        quest_id: int,
    ) -> DungeonCompletionResponse:
        """Clear a dungeon quest.

        Args:
            quests_service: Quests service.
            request: Authenticated request.
            quest_id: Dungeon quest ID.

        Returns:
            The quest and the caller's updated profile.

        Raises:
            CustomHTTPException: 404 if the quest is missing, 400 if already cleared or the rewards are out of range.
        """
        try:
            return await quests_service.complete_dungeon_quest(request.user.id, quest_id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except (AlreadyCompletedError, ValidationError) as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e
