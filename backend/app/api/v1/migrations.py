# app/api/v1/migrations.py
from typing import Any

from fastapi import APIRouter, Depends

from app.api.deps import AdminDep, get_pool
from app.models.registry import MigrationsStatus
from app.services import migrations

router = APIRouter(prefix="/admin/migrations", tags=["migrations"])


@router.get("/status", response_model=MigrationsStatus)
async def migrations_status(_admin: AdminDep, pool: Any = Depends(get_pool)) -> MigrationsStatus:
    """Report the applied migration version and whether it is dirty."""
    async with pool.acquire() as conn:
        return await migrations.status(conn)
