"""Repository for the penalty quest completion ledger."""

from __future__ import annotations

import datetime as dt

import asyncpg
from asyncpg import Connection

from repository.base import BaseRepository
from repository.exceptions import translate_integrity_error


class PenaltyQuestsRepository(BaseRepository):
    """Repository for ``quests.penalty_completions``.

    The unique constraint on ``(quest_id, user_id, completed_date)`` allows one
    completion per quest, user and reset key.
    """

    async def has_completion(
        self,
        quest_id: int,
        user_id: int,
        completed_date: dt.date,
        *,
        conn: Connection | None = None,
    ) -> bool:
        """Check whether a completion exists for the reset key."""
        _conn = self._get_connection(conn)
        return await _conn.fetchval(
            """
            SELECT EXISTS (
                SELECT 1 FROM quests.penalty_completions
                WHERE quest_id = $1 AND user_id = $2 AND completed_date = $3
            )
            """,
            quest_id,
            user_id,
            completed_date,
        )

    async def insert_completion(
        self,
        quest_id: int,
        user_id: int,
        completed_date: dt.date,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Append a completion to the ledger.

        Args:
            quest_id: Penalty quest ID.
            user_id: User who completed it.
            completed_date: Reset key of the completion.
            conn: Optional connection for transaction support.

        Returns:
            Row with ``id``, ``completed_at`` and ``completed_date``.

        Raises:
            UniqueConstraintViolationError: If the user already completed the quest for this key.
            ForeignKeyViolationError: If the quest or user does not exist.
        """
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                """
                INSERT INTO quests.penalty_completions (quest_id, user_id, completed_date)
                VALUES ($1, $2, $3)
                RETURNING id, quest_id, user_id, completed_at, completed_date
                """,
                quest_id,
                user_id,
                completed_date,
            )
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "quests.penalty_completions") from e
        return dict(row)

    async def fetch_completions_for_date(
        self,
        user_id: int,
        completed_date: dt.date,
        *,
        conn: Connection | None = None,
    ) -> dict[int, dt.datetime]:
        """Map quest IDs to completion time for a user's completions on a reset key."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            """
            SELECT quest_id, completed_at
            FROM quests.penalty_completions
            WHERE user_id = $1 AND completed_date = $2
            """,
            user_id,
            completed_date,
        )
        return {row["quest_id"]: row["completed_at"] for row in rows}

    async def delete_completions_before(self, cutoff: dt.date, *, conn: Connection | None = None) -> int:
        """Delete ledger rows keyed before ``cutoff``.

        Args:
            cutoff: First reset key to keep.
            conn: Optional connection for transaction support.

        Returns:
            Number of rows deleted.
        """
        _conn = self._get_connection(conn)
        result = await _conn.execute("DELETE FROM quests.penalty_completions WHERE completed_date < $1", cutoff)
        return int(result.split()[-1])
