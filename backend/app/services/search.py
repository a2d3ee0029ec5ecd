# app/services/search.py
import asyncio
import logging
from typing import Any, Dict, List

import asyncpg

from app.core.errors import (
    MissingField,
    RowReadError,
    StorageError,
    StorageTimeout,
)
from app.models.search import SearchQuery, SearchRequest
from app.services.allow_list import AllowList
from app.services.materializer import collect_records
from app.services.query_builder import build_search_query
from app.services.tokenizer import prepare_search_terms

logger = logging.getLogger("search")

DEFAULT_SEARCH_TIMEOUT = 2.0
DEFAULT_ACQUIRE_TIMEOUT = 10.0


class SearchService:
    """
    Runs one free-text search: validate, tokenize, build, execute, materialize.

    Holds no per-request state, so a single instance is shared by all
    requests. ``pool`` is anything with asyncpg's ``Pool.acquire`` protocol.
    """

    def __init__(
        self,
        pool: Any,
        allow_list: AllowList,
        *,
        timeout: float = DEFAULT_SEARCH_TIMEOUT,
        acquire_timeout: float = DEFAULT_ACQUIRE_TIMEOUT,
    ):
        self.pool = pool
        self.allow_list = allow_list
        self.timeout = timeout
        self.acquire_timeout = acquire_timeout

    def prepare(self, req: SearchRequest, *, require_fields: bool = True) -> SearchQuery:
        """Validate the request and build its statement without touching storage."""
        if not req.model:
            raise MissingField("model")
        if require_fields and not req.fields:
            raise MissingField("fields", "'fields' array cannot be empty")
        if not req.query_text.strip():
            raise MissingField("queryText")
        limit = req.clamped_max_results()

        entry = self.allow_list.get(req.model)
        fields = self.allow_list.validate(req.model, req.fields)
        terms = prepare_search_terms(req.query_text)

        query = build_search_query(
            entry, fields, terms, req.query_text, limit, fuzzy=req.fuzzy
        )
        logger.info(
            "Search model=%s fields=%d terms=%d limit=%d fuzzy=%s",
            req.model, len(fields), len(terms), limit, req.fuzzy,
        )
        return query

    async def search(self, req: SearchRequest, *, require_fields: bool = True) -> List[Dict[str, Any]]:
        query = self.prepare(req, require_fields=require_fields)
        results = await self.execute(query)
        logger.info("Search model=%s returned %d rows", req.model, len(results))
        return results

    async def execute(self, query: SearchQuery) -> List[Dict[str, Any]]:
        """
        Run a built statement under the search deadline.

        The deadline starts once a connection is in hand; waiting for the
        pool is bounded separately by ``acquire_timeout``.
        """
        try:
            async with self.pool.acquire(timeout=self.acquire_timeout) as conn:
                try:
                    return await asyncio.wait_for(self._fetch(conn, query), timeout=self.timeout)
                except asyncio.TimeoutError as exc:
                    logger.error(
                        "Search timed out after %.2fs\nQuery: %s\nArgs: %s",
                        self.timeout, query.sql, query.args,
                    )
                    raise StorageTimeout() from exc
        except asyncio.TimeoutError as exc:
            logger.error(
                "Timed out after %.2fs waiting for a database connection\nQuery: %s\nArgs: %s",
                self.acquire_timeout, query.sql, query.args,
            )
            raise StorageTimeout() from exc
        except RowReadError:
            logger.error("Row read failed\nQuery: %s\nArgs: %s", query.sql, query.args)
            raise
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            logger.error("Search query error: %s\nQuery: %s\nArgs: %s", exc, query.sql, query.args)
            raise StorageError() from exc

    @staticmethod
    async def _fetch(conn: Any, query: SearchQuery) -> List[Dict[str, Any]]:
        # asyncpg cursors only live inside a transaction
        async with conn.transaction(readonly=True):
            return await collect_records(conn.cursor(query.sql, *query.args))
