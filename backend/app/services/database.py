# app/services/database.py
import logging

import asyncpg

from app.core.config import Settings

logger = logging.getLogger("database")


async def create_pool(settings: Settings) -> asyncpg.Pool:
    """
    Open the shared connection pool and verify we can actually reach Postgres.

    Pool limits: at most DB_MAX_OPEN_CONNS connections, DB_MAX_IDLE_CONNS kept
    open while idle, and idle connections recycled after DB_CONN_MAX_LIFETIME
    seconds.
    """
    max_size = settings.DB_MAX_OPEN_CONNS
    min_size = min(settings.DB_MAX_IDLE_CONNS, max_size)
    logger.info("Connecting to Postgres (min_size=%d, max_size=%d)", min_size, max_size)

    pool = await asyncpg.create_pool(
        settings.DATABASE_URL,
        min_size=min_size,
        max_size=max_size,
        max_inactive_connection_lifetime=settings.DB_CONN_MAX_LIFETIME,
    )
    try:
        await ping(pool)
    except Exception:
        await pool.close()
        raise
    return pool


async def ping(pool: asyncpg.Pool) -> None:
    async with pool.acquire() as conn:
        await conn.fetchval("SELECT 1")
