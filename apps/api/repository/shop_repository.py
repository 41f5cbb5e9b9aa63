"""Repository for shop item data access."""

from __future__ import annotations

import asyncpg
from asyncpg import Connection

from repository.base import BaseRepository
from repository.exceptions import translate_integrity_error

_COLUMNS = "id, name, description, cost, created_by, is_active, created_at"
_EDITABLE = ("name", "description", "cost")


class ShopRepository(BaseRepository):
    """Repository for ``shop.items``.

    Items are never hard-deleted. Removing an item clears ``is_active`` so that
    inventory entries bought from it keep their history.
    """

    async def fetch_items(
        self,
        owner_id: int | None = None,
        *,
        conn: Connection | None = None,
    ) -> list[dict]:
        """Fetch active items, cheapest first.

        Args:
            owner_id: Restrict to items created by this user. None lists every active item.
            conn: Optional connection for transaction support.

        Returns:
            List of item rows.
        """
        _conn = self._get_connection(conn)
        query = f"""
            SELECT {_COLUMNS}
            FROM shop.items
            WHERE is_active AND ($1::bigint IS NULL OR created_by = $1)
            ORDER BY cost, id
        """
        rows = await _conn.fetch(query, owner_id)
        return [dict(row) for row in rows]

    async def fetch_item(self, item_id: int, *, conn: Connection | None = None) -> dict | None:
        """Fetch an item by ID, active or not."""
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(f"SELECT {_COLUMNS} FROM shop.items WHERE id = $1", item_id)
        return dict(row) if row else None

    async def create_item(
        self,
        owner_id: int,
        name: str,
        description: str,
        cost: int,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Insert a shop item.

        Args:
            owner_id: Owner user ID.
            name: Item name.
            description: Item description.
            cost: Price in coins.
            conn: Optional connection for transaction support.

        Returns:
            The created item row.
        """
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                f"""
                INSERT INTO shop.items (name, description, cost, created_by)
                VALUES ($1, $2, $3, $4)
                RETURNING {_COLUMNS}
                """,
                name,
                description,
                cost,
                owner_id,
            )
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "shop.items") from e
        return dict(row)

    async def update_item(self, item_id: int, updates: dict, *, conn: Connection | None = None) -> dict | None:
        """Apply a partial update to an item. Returns None if it does not exist."""
        _conn = self._get_connection(conn)
        set_clauses = []
        values: list[object] = [item_id]
        for column in _EDITABLE:
            if column in updates:
                values.append(updates[column])
                set_clauses.append(f"{column} = ${len(values)}")
        if not set_clauses:
            return await self.fetch_item(item_id, conn=conn)
        try:
            row = await _conn.fetchrow(
                f"UPDATE shop.items SET {', '.join(set_clauses)} WHERE id = $1 RETURNING {_COLUMNS}",
                *values,
            )
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "shop.items") from e
        return dict(row) if row else None

    async def deactivate_item(self, item_id: int, *, conn: Connection | None = None) -> bool:
        """Remove an item from the shop. Returns False when it did not exist."""
        _conn = self._get_connection(conn)
        result = await _conn.execute("UPDATE shop.items SET is_active = false WHERE id = $1", item_id)
        return result != "UPDATE 0"
