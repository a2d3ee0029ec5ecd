# app/models/registry.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RegisterModelRequest(BaseModel):
    """Payload for POST /admin/models/register."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    name: str = ""
    model_schema: Any = Field(None, alias="schema", description="JSON schema or metadata")


class ModelInfo(BaseModel):
    """One row of the models table."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    id: int
    name: str
    model_schema: Any = Field(None, alias="schema")
    version: int
    created_at: str = Field(..., alias="createdAt")


class MigrationsStatus(BaseModel):
    version: int = 0
    dirty: bool = False
