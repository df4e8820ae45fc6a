"""Auth endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from leadradar.api.v1._errors import raise_http_error
from leadradar.auth.jwt import REFRESH, create_token_pair, decode_jwt
from leadradar.core.config import get_config
from leadradar.core.exceptions import AuthenticationError, LeadRadarException
from leadradar.database.db import get_db_session
from leadradar.database.models import User
from leadradar.schemas.auth import LoginRequest, RefreshRequest, RegisterRequest, TokenClaims, TokenResponse
from leadradar.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_tokens(user_id: str, role: str, plan: str, permissions_version: int | None = None) -> TokenResponse:
    cfg = get_config()
    tokens = create_token_pair(
        user_id=user_id,
        role=role,
        plan=plan,
        secret=cfg.JWT_SECRET,
        permissions_version=permissions_version or cfg.JWT_PERMISSIONS_VERSION,
        access_ttl_minutes=cfg.JWT_ACCESS_TTL_MINUTES,
        refresh_ttl_days=cfg.JWT_REFRESH_TTL_DAYS,
    )
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
        expires_in=cfg.JWT_ACCESS_TTL_MINUTES * 60,
        plan=plan,
    )


def _tokens_for(user: User) -> TokenResponse:
    return _issue_tokens(user_id=user.id, role=user.role, plan=user.plan)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest) -> TokenResponse:
    with get_db_session() as session:
        try:
            user = UserService(db=session).register(payload.email, payload.password, payload.name)
        except LeadRadarException as exc:
            raise_http_error(exc, "register")
        return _tokens_for(user)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest) -> TokenResponse:
    if not payload.email.strip() or not payload.password.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials.")

    with get_db_session() as session:
        try:
            user = UserService(db=session).authenticate(payload.email, payload.password)
        except AuthenticationError as exc:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
        return _tokens_for(user)


@router.post("/refresh", response_model=TokenResponse)
def refresh(payload: RefreshRequest) -> TokenResponse:
    cfg = get_config()
    try:
        claims = TokenClaims(**decode_jwt(payload.refresh_token, cfg.JWT_SECRET, expected_use=REFRESH))
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid auth claims.") from exc

    with get_db_session() as session:
        user = UserService(db=session).get_user(claims.sub)
        if user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user.")
        # Role and plan are re-read so upgrades take effect on refresh.
        return _issue_tokens(
            user_id=user.id,
            role=user.role,
            plan=user.plan,
            permissions_version=claims.permissions_version,
        )
