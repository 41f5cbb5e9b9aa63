"""Fixtures for repository tests that run against a real Postgres."""

import glob
import os
from typing import Any, AsyncIterator, Generator
from uuid import uuid4

import asyncpg
import pytest
from pytest_databases.docker.postgres import PostgresService

from app import _async_pg_init

MIGRATIONS_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "migrations"))


def _apply_sql_dir(conn: Any, directory: str) -> None:
    """Apply all SQL files from a directory in sorted order."""
    for path in sorted(glob.glob(os.path.join(directory, "*.sql"))):
        with open(path, "r", encoding="utf-8") as f:
            sql_text = f.read()
        try:
            conn.execute(sql_text, prepare=False)
        except Exception as exc:
            raise RuntimeError(f"Failed applying SQL file: {path}") from exc
        conn.commit()


@pytest.fixture(scope="session")
def setup_test_db(postgres_connection: Any) -> Generator[None, Any, None]:
    """Apply the migrations once per session."""
    _apply_sql_dir(postgres_connection, MIGRATIONS_DIR)
    yield


@pytest.fixture
async def asyncpg_conn(postgres_service: PostgresService, setup_test_db: None) -> AsyncIterator[asyncpg.Connection]:
    """Provide an asyncpg connection to the migrated test database."""
    conn = await asyncpg.connect(
        user=postgres_service.user,
        password=postgres_service.password,
        host=postgres_service.host,
        port=postgres_service.port,
        database=postgres_service.database,
    )
    await _async_pg_init(conn)
    yield conn
    await conn.close()


@pytest.fixture
async def create_test_user(asyncpg_conn: asyncpg.Connection):
    """Factory fixture for creating test users.

    Usage:
        user_id = await create_test_user()
        user_id = await create_test_user(coins=50)
    """

    async def _create(coins: int = 100, total_xp: int = 0) -> int:
        return await asyncpg_conn.fetchval(
            """
            INSERT INTO core.users (username, password_hash, coins, total_xp)
            VALUES ($1, 'not-a-real-hash', $2, $3)
            RETURNING id
            """,
            f"user_{uuid4().hex[:12]}",
            coins,
            total_xp,
        )

    return _create


@pytest.fixture
async def fetch_totals(asyncpg_conn: asyncpg.Connection):
    """Return a function that reads a user's ``total_xp`` and ``coins``."""

    async def _fetch(user_id: int) -> dict:
        row = await asyncpg_conn.fetchrow("SELECT total_xp, coins FROM core.users WHERE id = $1", user_id)
        return dict(row)

    return _fetch
