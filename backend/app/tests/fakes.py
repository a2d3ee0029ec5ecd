# tests/fakes.py
"""Stand-ins for the parts of asyncpg the services touch."""

import asyncio
from typing import Any, Callable, Dict, List, Optional

ITEM_ROWS: List[Dict[str, Any]] = [
    {"id": 1, "name": "Laptop Stand", "category": "Office"},
    {"id": 2, "name": "USB Stand", "category": "Laptop Accessories"},
]


class FakeCursor:
    """Async iterator over canned rows, shaped like asyncpg's cursor."""

    def __init__(self, conn: "FakeConnection", rows: List[Dict[str, Any]]):
        self.conn = conn
        self.rows = list(rows)
        self.index = 0

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.conn.delay:
            try:
                await asyncio.sleep(self.conn.delay)
            except asyncio.CancelledError:
                self.conn.cancelled = True
                raise
        if self.conn.fail_at is not None and self.index == self.conn.fail_at:
            raise self.conn.fail_with
        if self.index >= len(self.rows):
            raise StopAsyncIteration
        row = self.rows[self.index]
        self.index += 1
        return row

    async def aclose(self):
        self.conn.cursor_closed = True


class FakeTransaction:
    def __init__(self, conn: "FakeConnection", readonly: bool):
        self.conn = conn
        self.readonly = readonly

    async def __aenter__(self):
        self.conn.transactions.append(self.readonly)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeConnection:
    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None):
        self.rows = rows or []
        self.calls: List[tuple] = []
        self.transactions: List[bool] = []
        self.delay: float = 0.0
        self.cancelled = False
        self.cursor_closed = False
        self.fail_at: Optional[int] = None
        self.fail_with: BaseException = ValueError("bad row")
        self.cursor_error: Optional[BaseException] = None
        # registry-style handlers: callables taking (sql, *args)
        self.fetchrow_handler: Optional[Callable[..., Any]] = None
        self.fetch_handler: Optional[Callable[..., Any]] = None
        self.execute_handler: Optional[Callable[..., Any]] = None
        self.fetchval_error: Optional[BaseException] = None

    def transaction(self, readonly: bool = False):
        return FakeTransaction(self, readonly)

    def cursor(self, sql: str, *args: Any):
        self.calls.append((sql, args))
        if self.cursor_error is not None:
            raise self.cursor_error
        return FakeCursor(self, self.rows)

    async def fetchrow(self, sql: str, *args: Any):
        self.calls.append((sql, args))
        return self.fetchrow_handler(sql, *args) if self.fetchrow_handler else None

    async def fetch(self, sql: str, *args: Any):
        self.calls.append((sql, args))
        return self.fetch_handler(sql, *args) if self.fetch_handler else []

    async def execute(self, sql: str, *args: Any):
        self.calls.append((sql, args))
        return self.execute_handler(sql, *args) if self.execute_handler else "OK"

    async def fetchval(self, sql: str, *args: Any):
        self.calls.append((sql, args))
        if self.fetchval_error is not None:
            raise self.fetchval_error
        return 1


class _Acquire:
    def __init__(self, pool: "FakePool"):
        self.pool = pool

    async def __aenter__(self):
        if self.pool.acquire_error is not None:
            raise self.pool.acquire_error
        self.pool.acquired += 1
        return self.pool.conn

    async def __aexit__(self, exc_type, exc, tb):
        self.pool.released += 1
        return False


class FakePool:
    def __init__(self, conn: Optional[FakeConnection] = None):
        self.conn = conn or FakeConnection()
        self.acquired = 0
        self.released = 0
        self.closed = False
        self.acquire_error: Optional[BaseException] = None

    def acquire(self, timeout: Optional[float] = None):
        return _Acquire(self)

    async def close(self):
        self.closed = True


class ForbiddenPool:
    """Storage stub that fails the test if anything tries to use it."""

    def __init__(self):
        self.touched = False

    def acquire(self, timeout: Optional[float] = None):
        self.touched = True
        raise AssertionError("storage must not be accessed")


