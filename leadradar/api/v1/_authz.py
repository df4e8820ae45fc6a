"""Bearer-token authorization shared by the v1 routers."""

from __future__ import annotations

from fastapi import HTTPException, status

from leadradar.auth.rbac import require_scopes
from leadradar.core.config import get_config
from leadradar.core.dependencies import CurrentUser, get_current_user
from leadradar.core.exceptions import AuthenticationError, AuthorizationError


def bearer_token(authorization: str | None) -> str:
    scheme, _, token = (authorization or "").strip().partition(" ")
    if not scheme:
        raise AuthenticationError("Authorization header is required.")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization header must use Bearer token.")
    return token.strip()


def authorize(authorization: str | None, scopes: list[str]) -> CurrentUser:
    user = get_current_user(bearer_token(authorization), settings=get_config())
    require_scopes(user.role, scopes)
    return user


def authorize_or_raise(authorization: str | None, scopes: list[str]) -> CurrentUser:
    """``authorize`` with 401 for identity problems and 403 for missing scopes."""
    try:
        return authorize(authorization, scopes)
    except AuthorizationError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
