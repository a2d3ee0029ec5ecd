# app/api/v1/query.py
import asyncio
import json
import logging
from typing import Any, Awaitable, Dict, List, TypeVar

from fastapi import APIRouter, Request
from pydantic import ValidationError

from app.api.deps import SearchServiceDep
from app.core.errors import ClientDisconnected, MalformedRequest
from app.models.search import SearchRequest, SearchResponse

logger = logging.getLogger("api.query")

# POST /query keeps the original contract (fields required, bare array);
# POST /api/v1/search wraps results with a count and allows full-row projection.
legacy_router = APIRouter(tags=["query"])
router = APIRouter(prefix="/api/v1", tags=["query"])

DISCONNECT_POLL_INTERVAL = 0.25

T = TypeVar("T")


def parse_search_request(body: bytes) -> SearchRequest:
    try:
        payload = json.loads(body or b"")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedRequest("invalid JSON payload") from exc
    if not isinstance(payload, dict):
        raise MalformedRequest("invalid JSON payload")
    try:
        return SearchRequest.model_validate(payload)
    except ValidationError as exc:
        errors = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()
        ]
        raise MalformedRequest("invalid JSON payload", detail={"errors": errors}) from exc


async def run_until_disconnected(request: Request, work: Awaitable[T]) -> T:
    """
    Await work, cancelling it if the client goes away first.

    A cancelled search ends the request with ClientDisconnected instead of
    letting CancelledError escape into the server.
    """
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_INTERVAL)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("Client disconnected from %s; cancelling search", request.url.path)
                task.cancel()
                # wait() does not re-raise the task's CancelledError
                await asyncio.wait({task})
                if task.cancelled():
                    raise ClientDisconnected()
                return task.result()
    finally:
        if not task.done():
            task.cancel()


@legacy_router.post("/query")
async def query_endpoint(request: Request, service: SearchServiceDep) -> List[Dict[str, Any]]:
    req = parse_search_request(await request.body())
    return await run_until_disconnected(request, service.search(req, require_fields=True))


@router.post("/search", response_model=SearchResponse)
async def search_endpoint(request: Request, service: SearchServiceDep) -> SearchResponse:
    req = parse_search_request(await request.body())
    results = await run_until_disconnected(request, service.search(req, require_fields=False))
    return SearchResponse(results=results, count=len(results))
