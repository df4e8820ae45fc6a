"""Caller identity resolved from bearer tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from leadradar.auth.jwt import ACCESS, decode_jwt
from leadradar.core.config import Config, get_config
from leadradar.core.enums import UserPlan
from leadradar.core.exceptions import AuthenticationError


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    role: str
    plan: str
    permissions_version: int
    claims: dict[str, Any]


def get_current_user(token: str, settings: Config | None = None) -> CurrentUser:
    """Resolve the caller from an access token; every query is then scoped to ``user_id``."""
    cfg = settings or get_config()
    claims = decode_jwt(token, cfg.JWT_SECRET, expected_use=ACCESS)
    try:
        user = CurrentUser(
            user_id=str(claims["sub"]),
            role=str(claims["role"]).lower(),
            plan=str(claims.get("plan") or UserPlan.FREE.value).lower(),
            permissions_version=int(claims.get("permissions_version", 1)),
            claims=claims,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid auth claims.") from exc
    if user.permissions_version < cfg.JWT_PERMISSIONS_VERSION:
        raise AuthenticationError("Token permissions are outdated.")
    return user
