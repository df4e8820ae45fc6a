from __future__ import annotations

from datetime import timedelta

import pytest

from leadradar.api.v1._authz import bearer_token
from leadradar.auth.jwt import create_token_pair, decode_jwt, encode_jwt
from leadradar.auth.passwords import hash_password, verify_password
from leadradar.auth.rbac import has_scopes, require_scopes
from leadradar.core.config import get_config
from leadradar.core.dependencies import get_current_user
from leadradar.core.exceptions import AuthenticationError, AuthorizationError


def test_jwt_roundtrip_contains_required_claims():
    tokens = create_token_pair(user_id="u-1", role="member", plan="pro", secret="test-secret")
    claims = decode_jwt(tokens.access_token, secret="test-secret")
    assert claims["sub"] == "u-1"
    assert claims["role"] == "member"
    assert claims["plan"] == "pro"
    assert claims["token_use"] == "access"
    assert "exp" in claims
    assert "iat" in claims
    assert "jti" in claims
    assert decode_jwt(tokens.refresh_token, secret="test-secret")["token_use"] == "refresh"


def test_jwt_rejects_tampering_and_expiry():
    token = create_token_pair(user_id="u-1", role="member", plan="free", secret="s").access_token
    with pytest.raises(AuthenticationError):
        decode_jwt(token, secret="other")
    with pytest.raises(AuthenticationError):
        decode_jwt("not-a-token", secret="s")

    expired = encode_jwt({"sub": "u-1"}, secret="s", ttl=timedelta(seconds=-60))
    with pytest.raises(AuthenticationError, match="expired"):
        decode_jwt(expired, secret="s")


def test_rbac_blocks_missing_scope():
    require_scopes("member", ["projects.read", "discover.scan"])
    assert has_scopes("admin", ["anything.at.all"])
    with pytest.raises(AuthorizationError):
        require_scopes("member", ["admin.users"])
    with pytest.raises(AuthorizationError):
        require_scopes("guest", ["projects.read"])


def test_password_hash_round_trip():
    stored = hash_password("correct horse", iterations=1000)
    assert verify_password("correct horse", stored)
    assert not verify_password("wrong horse", stored)
    assert not verify_password("correct horse", "garbage")
    assert stored != hash_password("correct horse", iterations=1000)


def test_decode_enforces_token_use():
    tokens = create_token_pair(user_id="u-1", role="member", plan="free", secret="s")
    assert decode_jwt(tokens.refresh_token, secret="s", expected_use="refresh")["sub"] == "u-1"
    with pytest.raises(AuthenticationError, match="access"):
        decode_jwt(tokens.refresh_token, secret="s", expected_use="access")


def test_bearer_header_parsing():
    assert bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"
    assert bearer_token("  bearer   tok ") == "tok"
    for header in (None, "", "Token abc", "Bearer "):
        with pytest.raises(AuthenticationError):
            bearer_token(header)


def test_access_token_resolves_current_user():
    cfg = get_config()
    tokens = create_token_pair(user_id="u-9", role="Member", plan="pro", secret=cfg.JWT_SECRET)

    user = get_current_user(tokens.access_token, settings=cfg)

    assert (user.user_id, user.role, user.plan) == ("u-9", "member", "pro")
    with pytest.raises(AuthenticationError):
        get_current_user(tokens.refresh_token, settings=cfg)
