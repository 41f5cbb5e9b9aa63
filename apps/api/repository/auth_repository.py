"""Repository for authentication data access."""

from __future__ import annotations

import datetime as dt

import asyncpg
from asyncpg import Connection

from repository.base import BaseRepository
from repository.exceptions import translate_integrity_error


class AuthRepository(BaseRepository):
    """Repository for accounts and bearer tokens."""

    async def create_user(
        self,
        username: str,
        password_hash: str,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Create a user account.

        Args:
            username: Trimmed username.
            password_hash: Bcrypt hash of the password.
            conn: Optional connection for transaction support.

        Returns:
            The new user row without the password hash.

        Raises:
            UniqueConstraintViolationError: If the username is taken.
        """
        _conn = self._get_connection(conn)
        query = """
            INSERT INTO core.users (username, password_hash)
            VALUES ($1, $2)
            RETURNING id, username, coins, total_xp
        """
        try:
            row = await _conn.fetchrow(query, username, password_hash)
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "core.users") from e
        return dict(row)

    async def fetch_user_by_username(
        self,
        username: str,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Fetch a user with credentials by username, ignoring case.

        Args:
            username: Username to look up.
            conn: Optional connection for transaction support.

        Returns:
            User row including ``password_hash``, or None.
        """
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            """
            SELECT id, username, password_hash, coins, total_xp
            FROM core.users
            WHERE lower(username) = lower($1)
            """,
            username,
        )
        return dict(row) if row else None

    async def insert_token(
        self,
        user_id: int,
        token_hash: str,
        expires_at: dt.datetime,
        *,
        conn: Connection | None = None,
    ) -> None:
        """Store the hash of a freshly issued bearer token.

        Args:
            user_id: Token owner.
            token_hash: SHA-256 of the plaintext token.
            expires_at: Expiry timestamp.
            conn: Optional connection for transaction support.
        """
        _conn = self._get_connection(conn)
        try:
            await _conn.execute(
                "INSERT INTO users.auth_tokens (token_hash, user_id, expires_at) VALUES ($1, $2, $3)",
                token_hash,
                user_id,
                expires_at,
            )
        except asyncpg.IntegrityConstraintViolationError as e:
            raise translate_integrity_error(e, "users.auth_tokens") from e

    async def fetch_user_by_token(
        self,
        token_hash: str,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Resolve an unexpired token hash to its user.

        Args:
            token_hash: SHA-256 of the presented token.
            conn: Optional connection for transaction support.

        Returns:
            User row with ``expires_at``, or None if unknown or expired.
        """
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            """
            SELECT u.id, u.username, u.coins, u.total_xp, t.expires_at
            FROM users.auth_tokens t
            JOIN core.users u ON u.id = t.user_id
            WHERE t.token_hash = $1 AND t.expires_at > now()
            """,
            token_hash,
        )
        return dict(row) if row else None

    async def delete_token(
        self,
        token_hash: str,
        *,
        conn: Connection | None = None,
    ) -> bool:
        """Revoke a token.

        Args:
            token_hash: SHA-256 of the token to revoke.
            conn: Optional connection for transaction support.

        Returns:
            True if a token was removed.
        """
        _conn = self._get_connection(conn)
        result = await _conn.execute("DELETE FROM users.auth_tokens WHERE token_hash = $1", token_hash)
        return result != "DELETE 0"

    async def fetch_user_by_id(self, user_id: int, *, conn: Connection | None = None) -> dict | None:
        """Fetch the public columns of a user by ID."""
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow("SELECT id, username, coins, total_xp FROM core.users WHERE id = $1", user_id)
        return dict(row) if row else None
