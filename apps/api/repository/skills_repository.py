"""Repository for skill data access."""

from __future__ import annotations

import asyncpg
from asyncpg import Connection

from repository.base import BaseRepository
from repository.exceptions import translate_data_error, translate_integrity_error

_COLUMNS = "id, name, xp, created_by, created_at"


class SkillsRepository(BaseRepository):
    """Repository for per-user skills.

    Skill names are unique per owner regardless of case. Lookups by name use
    ``lower(name)`` so that they hit the ``unique_skill_per_user`` index.
    """

    async def fetch_skills(self, owner_id: int, *, conn: Connection | None = None) -> list[dict]:
        """Fetch an owner's skills ordered by name."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            f"SELECT {_COLUMNS} FROM skills.skills WHERE created_by = $1 ORDER BY lower(name)",
            owner_id,
        )
        return [dict(row) for row in rows]

    async def fetch_skill(self, skill_id: int, *, conn: Connection | None = None) -> dict | None:
        """Fetch a skill by ID."""
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(f"SELECT {_COLUMNS} FROM skills.skills WHERE id = $1", skill_id)
        return dict(row) if row else None

    async def fetch_skill_by_name(
        self,
        owner_id: int,
        name: str,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Fetch an owner's skill by name, ignoring case."""
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            f"SELECT {_COLUMNS} FROM skills.skills WHERE created_by = $1 AND lower(name) = lower($2)",
            owner_id,
            name,
        )
        return dict(row) if row else None

    async def create_skill(
        self,
        owner_id: int,
        name: str,
        xp: int,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Create a skill.

        Args:
            owner_id: Owner user ID.
            name: Skill name.
            xp: Starting XP.
            conn: Optional connection for transaction support.

        Returns:
            The created skill row.

        Raises:
            UniqueConstraintViolationError: If the owner already has a skill with this name.
        """
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                f"""
                INSERT INTO skills.skills (name, xp, created_by)
                VALUES ($1, $2, $3)
                RETURNING {_COLUMNS}
                """,
                name,
                xp,
                owner_id,
            )
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "skills.skills") from e
        return dict(row)

    async def set_skill_xp(self, skill_id: int, xp: int, *, conn: Connection | None = None) -> dict | None:
        """Overwrite a skill's XP. Returns the updated row, or None if it does not exist."""
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                f"""
                UPDATE skills.skills SET xp = $2, updated_at = now()
                WHERE id = $1
                RETURNING {_COLUMNS}
                """,
                skill_id,
                xp,
            )
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "skills.skills") from e
        except asyncpg.DataError as e:
            raise translate_data_error(e, "skills.skills") from e
        return dict(row) if row else None

    async def delete_skill(self, skill_id: int, *, conn: Connection | None = None) -> bool:
        """Delete a skill. Returns False when it did not exist."""
        _conn = self._get_connection(conn)
        result = await _conn.execute("DELETE FROM skills.skills WHERE id = $1", skill_id)
        return result != "DELETE 0"

    async def add_skill_xp(
        self,
        owner_id: int,
        name: str,
        delta: int,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Add XP to an existing skill, matched by name ignoring case.

        Args:
            owner_id: Owner user ID.
            name: Skill name.
            delta: XP to add.
            conn: Optional connection for transaction support.

        Returns:
            The updated row, or None if the owner has no such skill.
        """
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                f"""
                UPDATE skills.skills SET xp = xp + $3, updated_at = now()
                WHERE created_by = $1 AND lower(name) = lower($2)
                RETURNING {_COLUMNS}
                """,
                owner_id,
                name,
                delta,
            )
        except asyncpg.DataError as e:
            raise translate_data_error(e, "skills.skills") from e
        return dict(row) if row else None

    async def upsert_skill_xp(
        self,
        owner_id: int,
        name: str,
        delta: int,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Add XP to a skill, creating it with ``delta`` XP when absent.

        Args:
            owner_id: Owner user ID.
            name: Skill name. An existing skill keeps its stored casing.
            delta: XP to add.
            conn: Optional connection for transaction support.

        Returns:
            The resulting skill row.
        """
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                f"""
                INSERT INTO skills.skills (name, xp, created_by)
                VALUES ($2, $3, $1)
                ON CONFLICT (created_by, lower(name))
                DO UPDATE SET xp = skills.skills.xp + EXCLUDED.xp, updated_at = now()
                RETURNING {_COLUMNS}
                """,
                owner_id,
                name,
                delta,
            )
        except asyncpg.DataError as e:
            raise translate_data_error(e, "skills.skills") from e
        return dict(row)

    async def fetch_skill_xp_map(self, owner_id: int, *, conn: Connection | None = None) -> dict[str, int]:
        """Return the owner's skills as a name to XP map."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            "SELECT name, xp FROM skills.skills WHERE created_by = $1 ORDER BY lower(name)",
            owner_id,
        )
        return {row["name"]: row["xp"] for row in rows}
