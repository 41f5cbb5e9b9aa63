"""Penalty quest routes."""

from __future__ import annotations

from typing import Annotated

import litestar
from litestar import Request
from litestar.datastructures import State
from litestar.params import Body
from litestar.status_codes import HTTP_200_OK, HTTP_400_BAD_REQUEST, HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND
from shadow_sdk.quests import (
    CleanupResponse,
    PenaltyAcceptResponse,
    PenaltyQuestCreateRequest,
    PenaltyQuestResponse,
    PenaltyQuestUpdateRequest,
)

from middleware.auth import AuthToken, AuthUser
from routes.dependencies import QUEST_DEPENDENCIES
from services.daily_reset_service import DailyResetService
from services.exceptions.common import AlreadyCompletedError, ForbiddenError, NotFoundError, ValidationError
from services.quests_service import QuestsService
from utilities.errors import CustomHTTPException


class PenaltyQuestsController(litestar.Controller):
    """CRUD and once-per-day completion for penalty quests."""

    tags = ["Penalty Quests"]
    path = "/penalty-quests"
    dependencies = QUEST_DEPENDENCIES

    @litestar.get(path="/", summary="List Penalty Quests", description="List the caller's penalty quests.")
    async def list_penalty_quests(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
    ) -> list[PenaltyQuestResponse]:
        """List the caller's penalty quests with today's completion state."""
        return await quests_service.list_penalty_quests(request.user.id)

    @litestar.post(path="/", summary="Create Penalty Quest", description="Create a penalty quest.")
    async def create_penalty_quest(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
        data: Annotated[PenaltyQuestCreateRequest, Body(title="Penalty quest")],
    ) -> PenaltyQuestResponse:
        """Create a penalty quest owned by the caller."""
        try:
            return await quests_service.create_penalty_quest(request.user.id, data)
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    @litestar.put(path="/{quest_id:int}", summary="Update Penalty Quest", description="Update a penalty quest.")
    async def update_penalty_quest(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
        quest_id: int,
        data: Annotated[PenaltyQuestUpdateRequest, Body(title="Penalty quest changes")],
    ) -> PenaltyQuestResponse:
        """Update one of the caller's penalty quests."""
        try:
            return await quests_service.update_penalty_quest(quest_id, request.user.id, data)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ForbiddenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_403_FORBIDDEN) from e
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e

    @litestar.delete(path="/{quest_id:int}", summary="Delete Penalty Quest", description="Delete a penalty quest.")
    async def delete_penalty_quest(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
        quest_id: int,
    ) -> None:
        """Delete one of the caller's penalty quests."""
        try:
            await quests_service.delete_penalty_quest(quest_id, request.user.id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ForbiddenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_403_FORBIDDEN) from e

    @litestar.patch(
        path="/{quest_id:int}/accept",
        summary="Accept Penalty Quest",
        description="Complete a penalty quest for today and collect its XP. Available again after the daily reset.",
    )
    async def accept_penalty_quest(
        self,
        quests_service: QuestsService,
        request: Request[AuthUser, AuthToken, State],
        quest_id: int,
    ) -> PenaltyAcceptResponse:
        """Complete one of the caller's penalty quests for today.

        Args:
            quests_service: Quests service.
            request: Authenticated request.
            quest_id: Penalty quest ID.

        Returns:
            XP awarded, new totals and when the quest is available again.

        Raises:
            CustomHTTPException: 404 if missing, 403 if not owned, 400 if already completed today or out of range.
        """
        try:
            return await quests_service.accept_penalty_quest(request.user.id, quest_id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ForbiddenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_403_FORBIDDEN) from e
        except (AlreadyCompletedError, ValidationError) as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e

    @litestar.post(
        path="/cleanup",
        summary="Clean Up Penalty Completions",
        description="Delete penalty completion records older than yesterday.",
        status_code=HTTP_200_OK,
    )
    async def cleanup_penalty_completions(self, daily_reset_service: DailyResetService) -> CleanupResponse:
        """Prune the penalty completion ledger."""
        return CleanupResponse(deleted_count=await daily_reset_service.cleanup_penalty_completions())
