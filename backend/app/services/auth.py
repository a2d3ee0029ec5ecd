"""Bearer-token helpers for the admin routes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import status

from app.core.config import Settings
from app.models.auth import JWTPayload


class AuthError(Exception):
    """Domain-specific authentication error."""

    def __init__(
        self,
        error: str,
        message: str,
        *,
        status_code: int = status.HTTP_401_UNAUTHORIZED,
        detail: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.message = message
        self.status_code = status_code
        self.detail = detail or None


class AuthService:
    """Issue and validate HS256 tokens signed with JWT_SECRET."""

    def __init__(
        self,
        settings: Settings,
        *,
        algorithm: str = "HS256",
        token_ttl: timedelta = timedelta(hours=24),
    ) -> None:
        self.settings = settings
        self.algorithm = algorithm
        self.token_ttl = token_ttl

    def _require_secret(self) -> str:
        secret = self.settings.JWT_SECRET
        if not secret:
            raise AuthError(
                "missing_jwt_secret",
                "server misconfiguration",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return secret

    def validate_jwt(self, token: str) -> JWTPayload:
        secret = self._require_secret()
        try:
            # signature algorithm pinned to HMAC
            decoded = jwt.decode(token, secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise AuthError("token_expired", "Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthError("invalid_token", f"invalid token: {exc}") from exc
        try:
            return JWTPayload(**decoded)
        except (TypeError, ValueError) as exc:
            raise AuthError("invalid_token", "invalid token: missing claims") from exc

    def create_jwt(self, subject: str, *, expires_in: Optional[timedelta] = None) -> str:
        """Create a signed token for subject."""
        now = datetime.now(timezone.utc)
        lifetime = expires_in or self.token_ttl
        payload = JWTPayload(
            sub=subject,
            iat=int(now.timestamp()),
            exp=int((now + lifetime).timestamp()),
        )
        return jwt.encode(payload.model_dump(), self._require_secret(), algorithm=self.algorithm)
