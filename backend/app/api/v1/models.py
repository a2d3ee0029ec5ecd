# app/api/v1/models.py
from typing import List

from fastapi import APIRouter, Query, Request, Response, status
from pydantic import ValidationError

from app.api.deps import AdminDep, RegistryDep
from app.core.errors import RegistryValidationError
from app.models.registry import ModelInfo, RegisterModelRequest

router = APIRouter(prefix="/admin/models", tags=["models"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=ModelInfo)
async def register_model(request: Request, registry: RegistryDep, _admin: AdminDep) -> ModelInfo:
    try:
        req = RegisterModelRequest.model_validate_json(await request.body())
    except ValidationError as exc:
        raise RegistryValidationError("invalid JSON payload") from exc
    return await registry.register(req)


@router.get("/get", response_model=ModelInfo)
async def read_model(
    registry: RegistryDep,
    _admin: AdminDep,
    name: str = Query("", description="Registered model name"),
) -> ModelInfo:
    if not name:
        raise RegistryValidationError("query parameter 'name' is required")
    return await registry.get(name)


@router.get("/list", response_model=List[ModelInfo])
async def list_models(registry: RegistryDep, _admin: AdminDep) -> List[ModelInfo]:
    return await registry.list()


@router.delete("/delete", status_code=status.HTTP_204_NO_CONTENT)
async def delete_model(
    registry: RegistryDep,
    _admin: AdminDep,
    name: str = Query("", description="Registered model name"),
) -> Response:
    if not name:
        raise RegistryValidationError("query parameter 'name' is required")
    await registry.delete(name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
