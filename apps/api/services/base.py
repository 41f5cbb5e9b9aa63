"""Base service class."""

from __future__ import annotations

from asyncpg import Pool
from litestar.datastructures import State


class BaseService:
    """Base class for all services.

    Services contain business logic and orchestrate repository calls. They own
    transaction boundaries: a service opens ``pool.acquire()`` and
    ``conn.transaction()`` and hands the connection to every repository call
    that must commit or roll back together.
    """

    def __init__(self, pool: Pool, state: State) -> None:
        """Initialize service.

        Args:
            pool: AsyncPG connection pool.
            state: Application state.
        """
        self._pool = pool
        self._state = state
