# tests/test_database.py
import asyncio

import pytest

from app.core.config import Settings
from app.services import database

from app.tests.fakes import FakeConnection, FakePool


def _patch_create_pool(monkeypatch, pool):
    seen = {}

    async def fake_create_pool(dsn, **kwargs):
        seen["dsn"] = dsn
        seen.update(kwargs)
        return pool

    monkeypatch.setattr(database.asyncpg, "create_pool", fake_create_pool)
    return seen


def test_pool_uses_configured_limits(monkeypatch):
    pool = FakePool(FakeConnection())
    seen = _patch_create_pool(monkeypatch, pool)

    got = asyncio.run(database.create_pool(Settings(DATABASE_URL="postgresql://test/test")))

    assert got is pool
    assert seen == {
        "dsn": "postgresql://test/test",
        "min_size": 5,
        "max_size": 20,
        "max_inactive_connection_lifetime": 1800.0,
    }
    assert pool.conn.calls == [("SELECT 1", ())]
    assert not pool.closed


def test_idle_connections_never_exceed_open_limit(monkeypatch):
    seen = _patch_create_pool(monkeypatch, FakePool(FakeConnection()))
    settings = Settings(DATABASE_URL="postgresql://test/test", DB_MAX_OPEN_CONNS=3, DB_MAX_IDLE_CONNS=8)

    asyncio.run(database.create_pool(settings))

    assert seen["min_size"] == 3
    assert seen["max_size"] == 3


def test_pool_is_closed_when_ping_fails(monkeypatch):
    conn = FakeConnection()
    conn.fetchval_error = OSError("connection refused")
    pool = FakePool(conn)
    _patch_create_pool(monkeypatch, pool)

    with pytest.raises(OSError):
        asyncio.run(database.create_pool(Settings(DATABASE_URL="postgresql://test/test")))

    assert pool.closed
