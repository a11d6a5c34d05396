"""JWT helpers and route decorators for authentication and role checks."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import timedelta
from functools import wraps
from typing import Any

import jwt
from flask import current_app, g, request

from campaign.errors import ForbiddenError, UnauthorizedError
from campaign.models.base import utcnow
from campaign.utils.dates import parse_duration

ALGORITHM = "HS256"
WEB_ROLE = "web"


def create_access_token(payload: Mapping[str, Any], expires_in: str | None = None) -> str:
    lifetime: timedelta = parse_duration(expires_in or current_app.config.get("JWT_EXPIRES_IN", "1h"))
    issued_at = utcnow()
    claims = dict(payload)
    claims["iat"] = issued_at
    claims["exp"] = issued_at + lifetime
    return jwt.encode(claims, current_app.config["JWT_SECRET"], algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    try:
        return jwt.decode(token, current_app.config["JWT_SECRET"], algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise UnauthorizedError("Token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise UnauthorizedError("Token is malformed or invalid.") from exc


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def token_required(view: Callable[..., Any]) -> Callable[..., Any]:
    """Require a valid bearer token; the decoded claims land in ``g.current_user``."""

    @wraps(view)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        token = _bearer_token()
        if token is None:
            raise UnauthorizedError("Access Denied. No token provided.")
        g.current_user = decode_access_token(token)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*allowed: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Require a valid token carrying at least one of ``allowed`` roles."""

    def decorator(view: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view)
        @token_required
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            roles = g.current_user.get("roles") or []
            if not any(role in allowed for role in roles):
                raise ForbiddenError("Access Denied: You do not have the required permissions.")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_user_id() -> int | None:
    claims = getattr(g, "current_user", None) or {}
    user_id = claims.get("id")
    return int(user_id) if user_id is not None else None


def current_client_token() -> str:
    claims = getattr(g, "current_user", None) or {}
    token = claims.get("userToken")
    if not token:
        raise UnauthorizedError("Token sem identificação de cliente.")
    return str(token)
