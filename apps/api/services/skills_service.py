"""Service layer for skill business logic."""

from __future__ import annotations

import logging

from asyncpg import Pool
from litestar.datastructures import State
from shadow_sdk.skills import SkillBulkXpResponse, SkillCreateRequest, SkillResponse, SkillUpdateRequest

from repository.exceptions import (
    CheckConstraintViolationError,
    ForeignKeyViolationError,
    NumericOutOfRangeError,
    UniqueConstraintViolationError,
)
from repository.skills_repository import SkillsRepository
from services.base import BaseService
from services.exceptions.common import NotOwnerError
from services.exceptions.skills import DuplicateSkillError, SkillNotFoundError, SkillValidationError
from services.exceptions.users import UserNotFoundError

log = logging.getLogger(__name__)

SKILL_NAME_MIN_LENGTH = 2
SKILL_NAME_MAX_LENGTH = 50


class SkillsService(BaseService):
    """Service for per-user skills."""

    def __init__(self, pool: Pool, state: State, skills_repo: SkillsRepository) -> None:
        """Initialize service.

        Args:
            pool: AsyncPG connection pool.
            state: Application state.
            skills_repo: Skills repository instance.
        """
        super().__init__(pool, state)
        self._skills_repo = skills_repo

    async def _fetch_owned(self, skill_id: int, user_id: int) -> dict:
        skill = await self._skills_repo.fetch_skill(skill_id)
        if skill is None:
            raise SkillNotFoundError(skill_id)
        if skill["created_by"] != user_id:
            raise NotOwnerError("skill", skill_id, user_id)
        return skill

    async def list_skills(self, user_id: int) -> list[SkillResponse]:
        """List the user's skills with derived levels."""
        rows = await self._skills_repo.fetch_skills(user_id)
        return [SkillResponse(**row) for row in rows]

    async def create_skill(self, user_id: int, data: SkillCreateRequest) -> SkillResponse:
        """Create a skill.

        Args:
            user_id: Owner user ID.
            data: Skill name and starting XP.

        Returns:
            The created skill.

        Raises:
            SkillValidationError: If the trimmed name is too short or too long.
            DuplicateSkillError: If the user already has a skill with this name, ignoring case.
        """
        name = data.name.strip()
        if not SKILL_NAME_MIN_LENGTH <= len(name) <= SKILL_NAME_MAX_LENGTH:
            raise SkillValidationError(
                f"Skill name must be between {SKILL_NAME_MIN_LENGTH} and {SKILL_NAME_MAX_LENGTH} characters"
            )
        try:
            row = await self._skills_repo.create_skill(user_id, name, data.xp)
        except UniqueConstraintViolationError as e:
            raise DuplicateSkillError(name) from e
        except ForeignKeyViolationError as e:
            raise UserNotFoundError(user_id) from e
        log.info("User %s created skill %r", user_id, name)
        return SkillResponse(**row)

    async def update_skill(self, skill_id: int, user_id: int, data: SkillUpdateRequest) -> SkillResponse:
        """Set the XP of one of the user's skills.

        Raises:
            SkillNotFoundError: If the skill does not exist.
            NotOwnerError: If the user does not own it.
        """
        await self._fetch_owned(skill_id, user_id)
        try:
            row = await self._skills_repo.set_skill_xp(skill_id, data.xp)
        except CheckConstraintViolationError as e:
            raise SkillValidationError("Please provide a valid XP value (0 or greater)") from e
        if row is None:
            raise SkillNotFoundError(skill_id)
        return SkillResponse(**row)

    async def delete_skill(self, skill_id: int, user_id: int) -> None:
        """Delete one of the user's skills."""
        await self._fetch_owned(skill_id, user_id)
        if not await self._skills_repo.delete_skill(skill_id):
            raise SkillNotFoundError(skill_id)
        log.info("User %s deleted skill %s", user_id, skill_id)

    async def add_xp_to_skills(self, user_id: int, skill_xp_updates: dict[str, int]) -> SkillBulkXpResponse:
        """Add XP to several of the user's skills by name.

        Each name is applied on its own. Names that match no skill are reported
        in ``errors`` and do not stop the others.

        Args:
            user_id: Owner user ID.
            skill_xp_updates: XP to add per skill name, matched ignoring case.

        Returns:
            The updated skills and one message per unmatched name.

        Raises:
            SkillValidationError: If no updates were given.
        """
        if not skill_xp_updates:
            raise SkillValidationError("Please provide skillXPUpdates object")

        updated: list[SkillResponse] = []
        errors: list[str] = []
        for name, delta in skill_xp_updates.items():
            try:
                row = await self._skills_repo.add_skill_xp(user_id, name.strip(), delta)
            except NumericOutOfRangeError:
                errors.append(f"Skill '{name}' XP is out of range")
                continue
            if row is None:
                errors.append(f"Skill '{name}' not found")
                continue
            updated.append(SkillResponse(**row, xp_added=delta))

        log.info("User %s added XP to %s skill(s), %s rejected", user_id, len(updated), len(errors))
        return SkillBulkXpResponse(updated=updated, errors=errors)
