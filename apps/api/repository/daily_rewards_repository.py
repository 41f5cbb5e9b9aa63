"""Repository for daily reward data access."""

from __future__ import annotations

import asyncpg
from asyncpg import Connection

from repository.base import BaseRepository
from repository.exceptions import translate_integrity_error

_COLUMNS = "id, name, description, created_by, created_at"


class DailyRewardsRepository(BaseRepository):
    """Repository for ``rewards.daily_rewards``."""

    async def fetch_rewards(self, owner_id: int, *, conn: Connection | None = None) -> list[dict]:
        """Fetch an owner's rewards, newest first."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            f"SELECT {_COLUMNS} FROM rewards.daily_rewards WHERE created_by = $1 ORDER BY created_at DESC, id DESC",
            owner_id,
        )
        return [dict(row) for row in rows]

    async def fetch_reward(self, reward_id: int, *, conn: Connection | None = None) -> dict | None:
        """Fetch a reward by ID."""
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(f"SELECT {_COLUMNS} FROM rewards.daily_rewards WHERE id = $1", reward_id)
        return dict(row) if row else None

    async def create_reward(
        self,
        owner_id: int,
        name: str,
        description: str,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Insert a daily reward and return the created row."""
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                f"""
                INSERT INTO rewards.daily_rewards (name, description, created_by)
                VALUES ($1, $2, $3)
                RETURNING {_COLUMNS}
                """,
                name,
                description,
                owner_id,
            )
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "rewards.daily_rewards") from e
        return dict(row)

    async def delete_reward(self, reward_id: int, *, conn: Connection | None = None) -> bool:
        """Delete a reward. Returns False when it did not exist."""
        _conn = self._get_connection(conn)
        result = await _conn.execute("DELETE FROM rewards.daily_rewards WHERE id = $1", reward_id)
        return result != "DELETE 0"
