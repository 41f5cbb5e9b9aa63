"""Base repository class."""

from __future__ import annotations

from asyncpg import Connection, Pool


class BaseRepository:
    """Base class for all repositories.

    Repositories own the SQL and raise repository exceptions on constraint
    violations. Every method accepts an optional connection so that it can run
    inside a transaction opened by a service.
    """

    def __init__(self, pool: Pool) -> None:
        """Initialize repository.

        Args:
            pool: AsyncPG connection pool.
        """
        self._pool = pool

    def _get_connection(self, conn: Connection | None = None) -> Connection | Pool:
        """Return the transaction connection when given, otherwise the pool."""
        return conn or self._pool
