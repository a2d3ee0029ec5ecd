# app/api/deps.py
"""Request-scoped dependencies wired from app.state at startup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Optional

from fastapi import Depends, Header, Request

from app.core.config import Settings, get_settings
from app.models.auth import JWTPayload
from app.services.allow_list import AllowList
from app.services.auth import AuthError, AuthService
from app.services.registry import ModelRegistry
from app.services.search import SearchService


def get_pool(request: Request) -> Any:
    return request.app.state.pool


def get_allow_list(request: Request) -> AllowList:
    return request.app.state.allow_list


def get_search_service(
    pool: Annotated[Any, Depends(get_pool)],
    allow_list: Annotated[AllowList, Depends(get_allow_list)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SearchService:
    return SearchService(
        pool,
        allow_list,
        timeout=settings.SEARCH_TIMEOUT,
        acquire_timeout=settings.POOL_ACQUIRE_TIMEOUT,
    )


def get_registry(pool: Annotated[Any, Depends(get_pool)]) -> ModelRegistry:
    return ModelRegistry(pool)


def get_auth_service(settings: Annotated[Settings, Depends(get_settings)]) -> AuthService:
    return AuthService(settings)


@dataclass
class AuthContext:
    """Claims extracted from a validated bearer token."""

    subject: str
    token: str
    payload: JWTPayload


def require_admin(
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    authorization: Annotated[Optional[str], Header(alias="Authorization")] = None,
) -> AuthContext:
    """Reject the request unless it carries a valid ``Bearer`` token."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme != "Bearer" or not token:
        raise AuthError("unauthorized", "missing or invalid Authorization header")
    payload = auth_service.validate_jwt(token)
    return AuthContext(subject=payload.sub, token=token, payload=payload)


SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
RegistryDep = Annotated[ModelRegistry, Depends(get_registry)]
AdminDep = Annotated[AuthContext, Depends(require_admin)]
