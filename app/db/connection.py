"""Asyncpg connection utilities."""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import asyncpg

from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

_pool: Optional[asyncpg.pool.Pool] = None

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def _connect_kwargs() -> dict:
    # Azure PostgreSQL requires SSL
    ssl_required = "postgres.database.azure.com" in settings.pg_host.lower()
    # Empty password means trust auth for local development
    password = settings.pg_password.strip() or None
    return {
        "host": settings.pg_host,
        "port": settings.pg_port,
        "user": settings.pg_user,
        "password": password,
        "ssl": "require" if ssl_required else None,
    }


async def ensure_database_exists() -> None:
    """Create the database if it doesn't exist."""
    try:
        conn = await asyncpg.connect(database="postgres", **_connect_kwargs())
    except (OSError, asyncpg.PostgresError) as exc:
        # No access to the maintenance database; assume the target exists
        logger.info("Could not check database via 'postgres' database: %s", exc)
        return

    try:
        db_exists = await conn.fetchval(
            "SELECT 1 FROM pg_database WHERE datname = $1",
            settings.pg_database,
        )
        if not db_exists:
            await conn.execute(f'CREATE DATABASE "{settings.pg_database}"')
            logger.info("Created database: %s", settings.pg_database)
    finally:
        await conn.close()


async def ensure_schema_exists(pool: asyncpg.pool.Pool) -> None:
    """Create tables and indexes if they don't exist."""
    if not SCHEMA_PATH.exists():
        logger.warning("Schema file not found at %s", SCHEMA_PATH)
        return
    async with pool.acquire() as conn:
        await conn.execute(SCHEMA_PATH.read_text())
    logger.info("Database schema ensured")


async def init_db() -> asyncpg.pool.Pool:
    """Initialize database connection pool and ensure database/schema exist."""
    global _pool
    if _pool is None:
        await ensure_database_exists()
        _pool = await asyncpg.create_pool(
            database=settings.pg_database,
            min_size=1,
            max_size=10,
            **_connect_kwargs(),
        )
        await ensure_schema_exists(_pool)
    return _pool


async def get_pool() -> asyncpg.pool.Pool:
    if _pool is None:
        return await init_db()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def transaction() -> AsyncIterator[asyncpg.Connection]:
    """Yield a connection inside a transaction; any exception rolls it back."""
    pool = await get_pool()
    async with pool.acquire() as conn:
        async with conn.transaction():
            yield conn


@asynccontextmanager
async def connection(conn: Optional[asyncpg.Connection] = None) -> AsyncIterator[asyncpg.Connection]:
    """Reuse ``conn`` when a caller already holds one, otherwise acquire from the pool."""
    if conn is not None:
        yield conn
        return
    pool = await get_pool()
    async with pool.acquire() as acquired:
        yield acquired
