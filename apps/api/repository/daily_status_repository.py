"""Repository for per-day daily quest status."""

from __future__ import annotations

import datetime as dt

import asyncpg
from asyncpg import Connection

from repository.base import BaseRepository
from repository.exceptions import translate_integrity_error


class DailyStatusRepository(BaseRepository):
    """Repository for ``quests.daily_status``.

    One row per user per reset key. Both writers only touch a row while its
    ``finished_today`` flag is false, so a finished day is immutable.
    """

    async def fetch_status(
        self,
        user_id: int,
        reset_date: dt.date,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Fetch a user's status row for a reset key.

        Args:
            user_id: User ID.
            reset_date: Reset key.
            conn: Optional connection for transaction support.

        Returns:
            Row with ``completed_quest_ids``, ``finished_today`` and ``finished_at``, or None.
        """
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            """
            SELECT reset_date, completed_quest_ids, finished_today, finished_at
            FROM quests.daily_status
            WHERE user_id = $1 AND reset_date = $2
            """,
            user_id,
            reset_date,
        )
        return dict(row) if row else None

    async def toggle_quest(
        self,
        user_id: int,
        reset_date: dt.date,
        quest_id: int,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Flip a quest's membership in the day's completed set.

        The row is created on first use. The statement writes nothing once the
        day is finished.

        Args:
            user_id: User ID.
            reset_date: Reset key.
            quest_id: Quest to add or remove.
            conn: Optional connection for transaction support.

        Returns:
            Row with the new ``completed_quest_ids`` and ``finished_today``, or None if the day is finished.

        Raises:
            ForeignKeyViolationError: If the user does not exist.
        """
        _conn = self._get_connection(conn)
        query = """
            INSERT INTO quests.daily_status AS ds (user_id, reset_date, completed_quest_ids)
            VALUES ($1, $2, ARRAY[$3::bigint])
            ON CONFLICT (user_id, reset_date) DO UPDATE
            SET completed_quest_ids = CASE
                WHEN $3::bigint = ANY(ds.completed_quest_ids) THEN array_remove(ds.completed_quest_ids, $3::bigint)
                ELSE array_append(ds.completed_quest_ids, $3::bigint)
            END
            WHERE NOT ds.finished_today
            RETURNING completed_quest_ids, finished_today
        """
        try:
            row = await _conn.fetchrow(query, user_id, reset_date, quest_id)
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "quests.daily_status") from e
        return dict(row) if row else None

    async def finish_day(
        self,
        user_id: int,
        reset_date: dt.date,
        quest_ids: list[int],
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Mark the day finished and store the completed quest set.

        Args:
            user_id: User ID.
            reset_date: Reset key.
            quest_ids: Quests completed today.
            conn: Optional connection for transaction support.

        Returns:
            The finished row, or None if the day was already finished.

        Raises:
            ForeignKeyViolationError: If the user does not exist.
        """
        _conn = self._get_connection(conn)
        query = """
            INSERT INTO quests.daily_status AS ds (user_id, reset_date, completed_quest_ids, finished_today, finished_at)
            VALUES ($1, $2, $3::bigint[], true, now())
            ON CONFLICT (user_id, reset_date) DO UPDATE
            SET completed_quest_ids = EXCLUDED.completed_quest_ids, finished_today = true, finished_at = now()
            WHERE NOT ds.finished_today
            RETURNING completed_quest_ids, finished_today, finished_at
        """
        try:
            row = await _conn.fetchrow(query, user_id, reset_date, quest_ids)
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "quests.daily_status") from e
        return dict(row) if row else None
