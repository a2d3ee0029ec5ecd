# app/core/errors.py
"""Domain errors raised by the search pipeline and the model registry.

Each error carries a machine-readable ``error`` code, a ``message`` that is
safe to return to callers, and the HTTP status the API layer should use.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class ServiceError(Exception):
    """Base class for errors rendered as ``{"error", "message", "detail"}``."""

    error = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or None


class SearchError(ServiceError):
    """Any failure of a search request."""


class MalformedRequest(SearchError):
    error = "malformed_request"
    status_code = status.HTTP_400_BAD_REQUEST


class MissingField(SearchError):
    error = "missing_field"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"'{field}' is required", detail={"field": field})
        self.field = field


class UnknownModel(SearchError):
    error = "unknown_model"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, model: str) -> None:
        super().__init__("model not found", detail={"model": model})
        self.model = model


class FieldNotAllowed(SearchError):
    error = "field_not_allowed"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, model: str) -> None:
        super().__init__(
            f"field '{field}' not allowed for model '{model}'",
            detail={"field": field, "model": model},
        )
        self.field = field
        self.model = model


class StorageTimeout(SearchError):
    error = "storage_timeout"

    def __init__(self, message: str = "database query timed out") -> None:
        super().__init__(message)


class StorageError(SearchError):
    error = "storage_error"

    def __init__(self, message: str = "database query error") -> None:
        super().__init__(message)


class RowReadError(SearchError):
    error = "row_read_error"

    def __init__(self, message: str = "row scan error") -> None:
        super().__init__(message)


class ClientDisconnected(SearchError):
    """The caller went away before the search finished; nobody reads the reply."""

    error = "client_disconnected"
    status_code = 499

    def __init__(self) -> None:
        super().__init__("client closed request")


class RegistryError(ServiceError):
    """Failures of the model-registry admin operations."""


class ModelNotFound(RegistryError):
    error = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__("model not found", detail={"name": name})


class ModelConflict(RegistryError):
    error = "conflict"
    status_code = status.HTTP_409_CONFLICT


class RegistryValidationError(RegistryError):
    error = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class RegistryStorageError(RegistryError):
    error = "storage_error"


__all__ = [
    "ServiceError",
    "SearchError",
    "MalformedRequest",
    "MissingField",
    "UnknownModel",
    "FieldNotAllowed",
    "StorageTimeout",
    "StorageError",
    "RowReadError",
    "ClientDisconnected",
    "RegistryError",
    "ModelNotFound",
    "ModelConflict",
    "RegistryValidationError",
    "RegistryStorageError",
]
