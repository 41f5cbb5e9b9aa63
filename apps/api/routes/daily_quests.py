"""Daily quest routes."""

from __future__ import annotations

from typing import Annotated

import litestar
from litestar import Request
from litestar.datastructures import State
from litestar.params import Body
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND
from shadow_sdk.quests import DailyQuestCreateRequest, DailyQuestResponse, DailyQuestUpdateRequest

from middleware.auth import AuthToken, AuthUser
from routes.dependencies import QUEST_DEPENDENCIES
from services.exceptions.common import ForbiddenError, NotFoundError, ValidationError
from services.quests_service import QuestsService
from utilities.errors import CustomHTTPException


class DailyQuestsController(litestar.Controller):
    """CRUD for the caller's daily quests."""

    tags = ["Daily Quests"]
    path = "/daily-quests"
    dependencies = QUEST_DEPENDENCIES

    @litestar.get(path="/", summary="List Daily Quests", description="List the caller's daily quests.")
    async def list_daily_quests(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
    ) -> list[DailyQuestResponse]:
        """List the caller's daily quests with today's completion flag.

        Args:
            quests_service: Quests service.
            request: Authenticated request.

        Returns:
            Daily quests, newest first.
        """
        return await quests_service.list_daily_quests(request.user.id)

    @litestar.post(path="/", summary="Create Daily Quest", description="Create a daily quest.")
    async def create_daily_quest(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
        data: Annotated[DailyQuestCreateRequest, Body(title="Daily quest")],
    ) -> DailyQuestResponse:
        """Create a daily quest owned by the caller.

        Raises:
            CustomHTTPException: If the fields are invalid.
        """
        try:
            return await quests_service.create_daily_quest(request.user.id, data)
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    @litestar.put(path="/{quest_id:int}", summary="Update Daily Quest", description="Update a daily quest.")
    async def update_daily_quest(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
        quest_id: int,
        data: Annotated[DailyQuestUpdateRequest, Body(title="Daily quest changes")],
    ) -> DailyQuestResponse:
        """Update one of the caller's daily quests.

        Raises:
            CustomHTTPException: 404 if missing, 403 if not owned, 400 if invalid.
        """
        try:
            return await quests_service.update_daily_quest(quest_id, request.user.id, data)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ForbiddenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_403_FORBIDDEN) from e
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e

    @litestar.delete(path="/{quest_id:int}", summary="Delete Daily Quest", description="Delete a daily quest.")
    async def delete_daily_quest(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
        quest_id: int,
    ) -> None:
        """Delete one of the caller's daily quests.

        Raises:
            CustomHTTPException: 404 if missing, 403 if not owned.
        """
        try:
            await quests_service.delete_daily_quest(quest_id, request.user.id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ForbiddenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_403_FORBIDDEN) from e
