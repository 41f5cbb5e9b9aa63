"""Repository for daily, dungeon and penalty quest data access."""

from __future__ import annotations

from typing import Literal

import asyncpg
from asyncpg import Connection

from repository.base import BaseRepository
from repository.exceptions import translate_integrity_error

QuestKind = Literal["daily", "dungeon", "penalty"]

_TABLES: dict[QuestKind, str] = {
    "daily": "quests.daily_quests",
    "dungeon": "quests.dungeon_quests",
    "penalty": "quests.penalty_quests",
}

_EDITABLE: dict[QuestKind, tuple[str, ...]] = {
    "daily": ("name", "xp", "coins", "skill"),
    "dungeon": ("name", "xp", "coins", "skill", "title"),
    "penalty": ("name", "xp", "skill"),
}


def _columns(kind: QuestKind) -> str:
    return ", ".join(("id", *_EDITABLE[kind], "created_by", "created_at"))


class QuestsRepository(BaseRepository):
    """Repository for the three quest kinds and the dungeon completion ledger.

    The quest kinds share one shape and differ only in their reward columns, so
    every CRUD method takes the ``kind`` to operate on.
    """

    async def fetch_quests(
        self,
        kind: QuestKind,
        owner_id: int,
        *,
        conn: Connection | None = None,
    ) -> list[dict]:
        """Fetch an owner's quests of one kind, newest first.

        Args:
            kind: Quest kind.
            owner_id: Owner user ID.
            conn: Optional connection for transaction support.

        Returns:
            List of quest rows.
        """
        _conn = self._get_connection(conn)
        query = f"""
            SELECT {_columns(kind)}
            FROM {_TABLES[kind]}
            WHERE created_by = $1
            ORDER BY created_at DESC, id DESC
        """
        rows = await _conn.fetch(query, owner_id)
        return [dict(row) for row in rows]

    async def fetch_quest(
        self,
        kind: QuestKind,
        quest_id: int,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Fetch a single quest by ID."""
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(f"SELECT {_columns(kind)} FROM {_TABLES[kind]} WHERE id = $1", quest_id)
        return dict(row) if row else None

    async def create_quest(
        self,
        kind: QuestKind,
        owner_id: int,
        fields: dict,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Insert a quest.

        Args:
            kind: Quest kind.
            owner_id: Owner user ID.
            fields: Value for every editable column of the kind.
            conn: Optional connection for transaction support.

        Returns:
            The created quest row.

        Raises:
            ForeignKeyViolationError: If the owner does not exist.
            CheckConstraintViolationError: If a reward is out of range.
        """
        _conn = self._get_connection(conn)
        editable = _EDITABLE[kind]
        placeholders = ", ".join(f"${idx}" for idx in range(1, len(editable) + 2))
        query = f"""
            INSERT INTO {_TABLES[kind]} ({", ".join(editable)}, created_by)
            VALUES ({placeholders})
            RETURNING {_columns(kind)}
        """
        try:
            row = await _conn.fetchrow(query, *(fields[column] for column in editable), owner_id)
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, _TABLES[kind]) from e
        return dict(row)

    async def update_quest(
        self,
        kind: QuestKind,
        quest_id: int,
        updates: dict,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Apply a partial update to a quest.

        Args:
            kind: Quest kind.
            quest_id: Quest ID.
            updates: Column to value mapping. Unknown columns are ignored.
            conn: Optional connection for transaction support.

        Returns:
            The updated row, or None if the quest does not exist.
        """
        _conn = self._get_connection(conn)
        set_clauses = []
        values: list[object] = [quest_id]
        for column in _EDITABLE[kind]:
            if column in updates:
                values.append(updates[column])
                set_clauses.append(f"{column} = ${len(values)}")
        if not set_clauses:
            return await self.fetch_quest(kind, quest_id, conn=conn)
        query = f"""
            UPDATE {_TABLES[kind]}
            SET {", ".join(set_clauses)}
            WHERE id = $1
            RETURNING {_columns(kind)}
        """
        try:
            row = await _conn.fetchrow(query, *values)
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, _TABLES[kind]) from e
        return dict(row) if row else None

    async def delete_quest(self, kind: QuestKind, quest_id: int, *, conn: Connection | None = None) -> bool:
        """Delete a quest. Returns False when it did not exist."""
        _conn = self._get_connection(conn)
        result = await _conn.execute(f"DELETE FROM {_TABLES[kind]} WHERE id = $1", quest_id)
        return result != "DELETE 0"

    # ===== Dungeon completion ledger =====

    async def insert_dungeon_completion(
        self,
        quest_id: int,
        user_id: int,
        *,
        conn: Connection | None = None,
    ) -> None:
        """Record that a user cleared a dungeon quest.

        Args:
            quest_id: Dungeon quest ID.
            user_id: User who cleared it.
            conn: Optional connection for transaction support.

        Raises:
            UniqueConstraintViolationError: If the user already cleared this quest.
            ForeignKeyViolationError: If the quest or user does not exist.
        """
        _conn = self._get_connection(conn)
        try:
            await _conn.execute(
                "INSERT INTO quests.dungeon_completions (quest_id, user_id) VALUES ($1, $2)",
                quest_id,
                user_id,
            )
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "quests.dungeon_completions") from e

    async def fetch_completed_dungeon_ids(self, user_id: int, *, conn: Connection | None = None) -> set[int]:
        """Return the IDs of every dungeon quest the user has cleared."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch("SELECT quest_id FROM quests.dungeon_completions WHERE user_id = $1", user_id)
        return {row["quest_id"] for row in rows}
