"""Skill routes."""

from __future__ import annotations

from typing import Annotated

import litestar
from litestar import Request
from litestar.datastructures import State
from litestar.di import Provide
from litestar.params import Body
from litestar.status_codes import HTTP_200_OK, HTTP_400_BAD_REQUEST, HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND
from shadow_sdk.skills import (
    SkillBulkXpRequest,
    SkillBulkXpResponse,
    SkillCreateRequest,
    SkillResponse,
    SkillUpdateRequest,
)

from middleware.auth import AuthToken, AuthUser
from routes.dependencies import provide_skills_repository, provide_skills_service
from services.exceptions.common import ForbiddenError, NotFoundError, ValidationError
from services.skills_service import SkillsService
from utilities.errors import CustomHTTPException


class SkillsController(litestar.Controller):
    """CRUD for the caller's skills."""

    tags = ["Skills"]
    path = "/skills"
    dependencies = {
        "skills_repo": Provide(provide_skills_repository),
        "skills_service": Provide(provide_skills_service),
    }

    @litestar.get(path="/", summary="List Skills", description="List the caller's skills with derived levels.")
    async def list_skills(
        self,
        skills_service: SkillsService,
        request: Request[AuthUser, AuthToken, State],
    ) -> list[SkillResponse]:
        """List the caller's skills."""
        return await skills_service.list_skills(request.user.id)

    @litestar.post(path="/", summary="Create Skill", description="Create a skill. Names are unique per user.")
    async def create_skill(
        self,
        skills_service: SkillsService,
        request: Request[AuthUser, AuthToken, State],
        data: Annotated[SkillCreateRequest, Body(title="Skill")],
    ) -> SkillResponse:
        """Create a skill.

        Raises:
            CustomHTTPException: If the name is invalid or already used by the caller.
        """
        try:
            return await skills_service.create_skill(request.user.id, data)
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    @litestar.post(
        path="/update-multiple",
        summary="Add XP To Skills",
        description="Add XP to several skills by name. Unknown names are reported without failing the others.",
        status_code=HTTP_200_OK,
    )
    async def update_multiple_skills(
        self,
        skills_service: SkillsService,
        request: Request[AuthUser, AuthToken, State],
        data: Annotated[SkillBulkXpRequest, Body(title="Skill XP updates")],
    ) -> SkillBulkXpResponse:
        """Add XP to several of the caller's skills."""
        try:
            return await skills_service.add_xp_to_skills(request.user.id, data.skill_xp_updates)
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e

    @litestar.put(path="/{skill_id:int}", summary="Update Skill", description="Set a skill's XP.")
    async def update_skill(
        self,
        skills_service: SkillsService,
        request: Request[AuthUser, AuthToken, State],
        skill_id: int,
        data: Annotated[SkillUpdateRequest, Body(title="Skill XP")],
    ) -> SkillResponse:
        """Set the XP of one of the caller's skills."""
        try:
            return await skills_service.update_skill(skill_id, request.user.id, data)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ForbiddenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_403_FORBIDDEN) from e
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e

    @litestar.delete(path="/{skill_id:int}", summary="Delete Skill", description="Delete a skill.")
    async def delete_skill(
        self,
        skills_service: SkillsService,
        request: Request[AuthUser, AuthToken, State],
        skill_id: int,
    ) -> None:
        """Delete one of the caller's skills."""
        try:
            await skills_service.delete_skill(skill_id, request.user.id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ForbiddenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_403_FORBIDDEN) from e
