# app/services/registry.py
import json
import logging
from typing import Any, List, Mapping

import asyncpg

from app.core.errors import (
    ModelConflict,
    ModelNotFound,
    RegistryStorageError,
    RegistryValidationError,
)
from app.models.registry import ModelInfo, RegisterModelRequest

logger = logging.getLogger("registry")

_INSERT = """
    INSERT INTO models (name, schema)
    VALUES ($1, $2::jsonb)
    RETURNING id, name, schema, version, created_at
"""

_SELECT_ONE = """
    SELECT id, name, schema, version, created_at
      FROM models
     WHERE name = $1
"""

_SELECT_ALL = """
    SELECT id, name, schema, version, created_at
      FROM models
     ORDER BY name
"""

_DELETE = "DELETE FROM models WHERE name = $1"


def _to_model_info(row: Mapping[str, Any]) -> ModelInfo:
    schema = row["schema"]
    if isinstance(schema, str):
        schema = json.loads(schema)
    created_at = row["created_at"]
    return ModelInfo(
        id=row["id"],
        name=row["name"],
        schema=schema,
        version=row["version"],
        createdAt=created_at.isoformat() if hasattr(created_at, "isoformat") else str(created_at),
    )


class ModelRegistry:
    """CRUD over the ``models`` metadata table."""

    def __init__(self, pool: Any):
        self.pool = pool

    async def register(self, req: RegisterModelRequest) -> ModelInfo:
        if not req.name.strip():
            raise RegistryValidationError("name is required")
        if req.model_schema is None:
            raise RegistryValidationError("schema is required")

        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(_INSERT, req.name, json.dumps(req.model_schema))
        except asyncpg.UniqueViolationError as exc:
            raise ModelConflict("model already exists", detail={"name": req.name}) from exc
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            logger.error("RegisterModel error: %s", exc)
            raise RegistryStorageError("database insert error") from exc

        logger.info("Registered model %s (id=%s)", req.name, row["id"])
        return _to_model_info(row)

    async def get(self, name: str) -> ModelInfo:
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(_SELECT_ONE, name)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            logger.error("ReadModel error: %s", exc)
            raise RegistryStorageError("database query error") from exc
        if row is None:
            raise ModelNotFound(name)
        return _to_model_info(row)

    async def list(self) -> List[ModelInfo]:
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(_SELECT_ALL)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            logger.error("ListModels error: %s", exc)
            raise RegistryStorageError("database query error") from exc
        return [_to_model_info(r) for r in rows]

    async def delete(self, name: str) -> None:
        try:
            async with self.pool.acquire() as conn:
                status = await conn.execute(_DELETE, name)
        except asyncpg.ForeignKeyViolationError as exc:
            raise ModelConflict("cannot delete: model in use", detail={"name": name}) from exc
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            logger.error("DeleteModel error: %s", exc)
            raise RegistryStorageError("database delete error") from exc

        # status is the command tag, e.g. "DELETE 1"
        if status.split()[-1] == "0":
            raise ModelNotFound(name)
        logger.info("Deleted model %s", name)
