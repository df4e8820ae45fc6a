"""HS256 access/refresh tokens for LeadRadar users.

Tokens carry the user id (``sub``), ``role`` and ``plan`` so a route can
authorize and pick the AI mode without a database read. ``token_use``
separates short-lived access tokens from refresh tokens.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from leadradar.core.exceptions import AuthenticationError

ACCESS = "access"
REFRESH = "refresh"

_HEADER = {"alg": "HS256", "typ": "JWT"}


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _unb64(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _segment(document: dict[str, Any]) -> str:
    return _b64(json.dumps(document, separators=(",", ":"), sort_keys=True).encode("utf-8"))


def _signature(signing_input: str, secret: str) -> str:
    if not secret:
        raise AuthenticationError("JWT secret must be configured.")
    return _b64(hmac.new(secret.encode("utf-8"), signing_input.encode("ascii"), hashlib.sha256).digest())


def _epoch(moment: datetime | None) -> int:
    return int((moment or datetime.now(timezone.utc)).timestamp())


def encode_jwt(
    payload: dict[str, Any],
    secret: str,
    ttl: timedelta,
    now: datetime | None = None,
) -> str:
    """Sign ``payload``; ``iat``/``exp``/``jti`` are filled in when absent."""
    issued = now or datetime.now(timezone.utc)
    claims = {"iat": _epoch(issued), "exp": _epoch(issued + ttl), "jti": uuid.uuid4().hex, **payload}
    signing_input = f"{_segment(_HEADER)}.{_segment(claims)}"
    return f"{signing_input}.{_signature(signing_input, secret)}"


def decode_jwt(
    token: str,
    secret: str,
    verify_exp: bool = True,
    expected_use: str | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Verify signature, expiry and (optionally) ``token_use``; return the claims."""
    parts = (token or "").split(".")
    if len(parts) != 3:
        raise AuthenticationError("Invalid token format.")
    signing_input = f"{parts[0]}.{parts[1]}"
    if not hmac.compare_digest(_signature(signing_input, secret), parts[2]):
        raise AuthenticationError("Invalid token signature.")

    try:
        claims = json.loads(_unb64(parts[1]))
    except ValueError as exc:
        raise AuthenticationError("Invalid token payload.") from exc
    if not isinstance(claims, dict):
        raise AuthenticationError("Invalid token payload.")

    if verify_exp:
        if not isinstance(claims.get("exp"), int):
            raise AuthenticationError("Token is missing exp claim.")
        if claims["exp"] < _epoch(now):
            raise AuthenticationError("Token has expired.")
    if expected_use is not None and claims.get("token_use") != expected_use:
        raise AuthenticationError(f"Expected token_use={expected_use}.")
    return claims


def create_token_pair(
    user_id: str,
    role: str,
    plan: str,
    secret: str,
    permissions_version: int = 1,
    access_ttl_minutes: int = 60,
    refresh_ttl_days: int = 14,
) -> TokenPair:
    base = {"sub": str(user_id), "role": role, "plan": plan, "permissions_version": permissions_version}
    return TokenPair(
        access_token=encode_jwt({**base, "token_use": ACCESS}, secret, timedelta(minutes=access_ttl_minutes)),
        refresh_token=encode_jwt({**base, "token_use": REFRESH}, secret, timedelta(days=refresh_ttl_days)),
    )
