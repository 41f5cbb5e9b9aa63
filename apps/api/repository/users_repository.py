"""Repository for user profile, title and inventory data access."""

from __future__ import annotations

import asyncpg
from asyncpg import Connection

from repository.base import BaseRepository
from repository.exceptions import translate_data_error, translate_integrity_error


class UsersRepository(BaseRepository):
    """Repository for users, their titles and their inventory."""

    # ===== Totals =====

    async def fetch_user(
        self,
        user_id: int,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Fetch a user's public columns.

        Args:
            user_id: User ID.
            conn: Optional connection for transaction support.

        Returns:
            User row, or None if the user does not exist.
        """
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            "SELECT id, username, coins, total_xp, created_at FROM core.users WHERE id = $1",
            user_id,
        )
        return dict(row) if row else None

    async def add_rewards(
        self,
        user_id: int,
        xp: int,
        coins: int,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Add XP and coins to a user's totals.

        Args:
            user_id: User ID.
            xp: XP to add.
            coins: Coins to add.
            conn: Optional connection for transaction support.

        Returns:
            Dict with the new ``total_xp`` and ``coins``, or None if the user does not exist.

        Raises:
            NumericOutOfRangeError: If a total would leave the column range.
        """
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                """
                UPDATE core.users
                SET total_xp = total_xp + $2, coins = coins + $3, updated_at = now()
                WHERE id = $1
                RETURNING total_xp, coins
                """,
                user_id,
                xp,
                coins,
            )
        except asyncpg.DataError as e:
            raise translate_data_error(e, "core.users") from e
        return dict(row) if row else None

    async def deduct_coins(
        self,
        user_id: int,
        amount: int,
        *,
        conn: Connection | None = None,
    ) -> int | None:
        """Deduct coins if the balance covers the amount.

        Args:
            user_id: User ID.
            amount: Coins to deduct.
            conn: Optional connection for transaction support.

        Returns:
            New balance, or None if the user cannot afford it.
        """
        _conn = self._get_connection(conn)
        return await _conn.fetchval(
            """
            UPDATE core.users
            SET coins = coins - $2, updated_at = now()
            WHERE id = $1 AND coins >= $2
            RETURNING coins
            """,
            user_id,
            amount,
        )

    async def fetch_coins(self, user_id: int, *, conn: Connection | None = None) -> int | None:
        """Fetch a user's coin balance."""
        _conn = self._get_connection(conn)
        return await _conn.fetchval("SELECT coins FROM core.users WHERE id = $1", user_id)

    async def set_totals(
        self,
        user_id: int,
        *,
        total_xp: int | None = None,
        coins: int | None = None,
        conn: Connection | None = None,
    ) -> dict | None:
        """Overwrite a user's totals. None leaves a column unchanged.

        Args:
            user_id: User ID.
            total_xp: New total XP.
            coins: New coin balance.
            conn: Optional connection for transaction support.

        Returns:
            Dict with the resulting ``total_xp`` and ``coins``, or None if the user does not exist.
        """
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                """
                UPDATE core.users
                SET total_xp = coalesce($2, total_xp), coins = coalesce($3, coins), updated_at = now()
                WHERE id = $1
                RETURNING total_xp, coins
                """,
                user_id,
                total_xp,
                coins,
            )
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "core.users") from e
        except asyncpg.DataError as e:
            raise translate_data_error(e, "core.users") from e
        return dict(row) if row else None

    # ===== Titles =====

    async def fetch_titles(self, user_id: int, *, conn: Connection | None = None) -> list[dict]:
        """Fetch a user's titles, oldest first."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            "SELECT name, source, awarded_at FROM users.titles WHERE user_id = $1 ORDER BY awarded_at, name",
            user_id,
        )
        return [dict(row) for row in rows]

    async def insert_title(
        self,
        user_id: int,
        name: str,
        source: str,
        *,
        conn: Connection | None = None,
    ) -> bool:
        """Grant a title unless the user already holds one with that name.

        Args:
            user_id: User ID.
            name: Title name.
            source: What granted the title.
            conn: Optional connection for transaction support.

        Returns:
            True if the title was newly granted.
        """
        _conn = self._get_connection(conn)
        result = await _conn.execute(
            """
            INSERT INTO users.titles (user_id, name, source)
            VALUES ($1, $2, $3)
            ON CONFLICT (user_id, name) DO NOTHING
            """,
            user_id,
            name,
            source,
        )
        return result == "INSERT 0 1"

    async def delete_title(self, user_id: int, name: str, *, conn: Connection | None = None) -> bool:
        """Remove a title. Returns False when the user does not hold it."""
        _conn = self._get_connection(conn)
        result = await _conn.execute("DELETE FROM users.titles WHERE user_id = $1 AND name = $2", user_id, name)
        return result != "DELETE 0"

    # ===== Inventory =====

    async def fetch_inventory(self, user_id: int, *, conn: Connection | None = None) -> list[dict]:
        """Fetch a user's inventory, newest first."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            """
            SELECT id, name, description, cost, purchased_at, used, used_at
            FROM users.inventory
            WHERE user_id = $1
            ORDER BY purchased_at DESC, id DESC
            """,
            user_id,
        )
        return [dict(row) for row in rows]

    async def insert_inventory_item(
        self,
        user_id: int,
        name: str,
        description: str,
        cost: int,
        *,
        conn: Connection | None = None,
    ) -> int:
        """Append an item to a user's inventory.

        Args:
            user_id: User ID.
            name: Item name at purchase time.
            description: Item description at purchase time.
            cost: Price paid.
            conn: Optional connection for transaction support.

        Returns:
            ID of the new inventory entry.
        """
        _conn = self._get_connection(conn)
        try:
            return await _conn.fetchval(
                """
                INSERT INTO users.inventory (user_id, name, description, cost)
                VALUES ($1, $2, $3, $4)
                RETURNING id
                """,
                user_id,
                name,
                description,
                cost,
            )
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "users.inventory") from e

    async def fetch_inventory_item(
        self,
        user_id: int,
        item_id: int,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Fetch one of the user's inventory entries."""
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            """
            SELECT id, name, description, cost, purchased_at, used, used_at
            FROM users.inventory
            WHERE user_id = $1 AND id = $2
            """,
            user_id,
            item_id,
        )
        return dict(row) if row else None

    async def mark_inventory_item_used(
        self,
        user_id: int,
        item_id: int,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Mark an unused inventory entry as used.

        Args:
            user_id: User ID.
            item_id: Inventory entry ID.
            conn: Optional connection for transaction support.

        Returns:
            The updated entry, or None if it is missing or already used.
        """
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            """
            UPDATE users.inventory
            SET used = true, used_at = now()
            WHERE user_id = $1 AND id = $2 AND NOT used
            RETURNING id, name, description, cost, purchased_at, used, used_at
            """,
            user_id,
            item_id,
        )
        return dict(row) if row else None

    async def delete_inventory_item(
        self,
        user_id: int,
        item_id: int,
        *,
        conn: Connection | None = None,
    ) -> str | None:
        """Remove an inventory entry. Returns its name, or None if it was not found."""
        _conn = self._get_connection(conn)
        return await _conn.fetchval(
            "DELETE FROM users.inventory WHERE user_id = $1 AND id = $2 RETURNING name",
            user_id,
            item_id,
        )

    # ===== Profile aggregates =====

    async def fetch_quest_stats(self, user_id: int, *, conn: Connection | None = None) -> dict:
        """Count created quests and recorded completions per quest kind.

        Daily completions are the quest IDs of finished days. Dungeon and penalty
        completions come from their ledgers. All counts are per user.

        Args:
            user_id: User ID.
            conn: Optional connection for transaction support.

        Returns:
            Dict of ``<kind>_total`` and ``<kind>_completed`` counts plus ``skills_used``.
        """
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            """
            SELECT
                (SELECT count(*) FROM quests.daily_quests WHERE created_by = $1) AS daily_total,
                (
                    SELECT coalesce(sum(cardinality(completed_quest_ids)), 0)
                    FROM quests.daily_status
                    WHERE user_id = $1 AND finished_today
                ) AS daily_completed,
                (SELECT count(*) FROM quests.dungeon_quests WHERE created_by = $1) AS dungeon_total,
                (SELECT count(*) FROM quests.dungeon_completions WHERE user_id = $1) AS dungeon_completed,
                (SELECT count(*) FROM quests.penalty_quests WHERE created_by = $1) AS penalty_total,
                (SELECT count(*) FROM quests.penalty_completions WHERE user_id = $1) AS penalty_completed,
                (SELECT count(*) FROM skills.skills WHERE created_by = $1 AND xp > 0) AS skills_used
            """,
            user_id,
        )
        return {key: int(value) for key, value in dict(row).items()}
