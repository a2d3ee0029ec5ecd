# app/services/materializer.py
"""
Turns asyncpg records of unknown, per-model shape into JSON-ready dicts.

Column values are mapped onto a small set of scalar kinds: text, number,
boolean, null and timestamps rendered as ISO-8601 text. Anything else is a
row the API cannot represent and aborts the whole result.
"""

import datetime
import decimal
import json
import logging
import uuid
from typing import Any, AsyncIterable, AsyncIterator, Dict, List, Mapping

from app.core.errors import RowReadError

logger = logging.getLogger("materializer")

Record = Dict[str, Any]


def to_json_value(value: Any) -> Any:
    """Convert one column value into a JSON-compatible scalar (or container)."""
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return str(value)
        return value
    if isinstance(value, decimal.Decimal):
        if not value.is_finite():
            return str(value)
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, datetime.timedelta):
        return str(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RowReadError() from exc
    if isinstance(value, (list, tuple)):
        return [to_json_value(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_json_value(v) for k, v in value.items()}
    raise RowReadError(f"unsupported column type {type(value).__name__}")


def materialize_row(record: Mapping[str, Any]) -> Record:
    """Key every column value by its column name, keeping column order."""
    return {name: to_json_value(value) for name, value in record.items()}


async def iter_records(rows: AsyncIterable[Mapping[str, Any]]) -> AsyncIterator[Record]:
    """
    Materialize rows one at a time.

    Any failure while reading or converting a row is raised as RowReadError.
    The underlying iterator is closed on every exit path, including when the
    consumer stops early or is cancelled.
    """
    iterator = rows.__aiter__()
    try:
        while True:
            try:
                raw = await iterator.__anext__()
            except StopAsyncIteration:
                return
            except RowReadError:
                raise
            except (ValueError, TypeError, UnicodeDecodeError, json.JSONDecodeError) as exc:
                logger.error("Failed to decode row: %s", exc)
                raise RowReadError() from exc
            try:
                yield materialize_row(raw)
            except RowReadError:
                logger.error("Failed to convert row with columns %s", list(raw.keys()))
                raise
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


async def collect_records(rows: AsyncIterable[Mapping[str, Any]]) -> List[Record]:
    """All-or-nothing: either every row materializes or RowReadError is raised."""
    results: List[Record] = []
    async for record in iter_records(rows):
        results.append(record)
    return results
