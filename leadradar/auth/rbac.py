"""Role to scope mapping for the v1 routers.

Scopes are ``<resource>.<action>`` strings declared next to each route.
"""

from __future__ import annotations

from collections.abc import Iterable

from leadradar.core.exceptions import AuthorizationError

WILDCARD = "*"

_MEMBER_GRANTS: dict[str, tuple[str, ...]] = {
    "discover": ("scan",),
    "opportunities": ("read", "write"),
    "projects": ("read", "write"),
    "contacts": ("write",),
    "outreach": ("generate",),
    "sequences": ("read", "write"),
    "settings": ("read", "write"),
}

ROLE_SCOPES: dict[str, frozenset[str]] = {
    "admin": frozenset({WILDCARD}),
    "member": frozenset(f"{resource}.{action}" for resource, actions in _MEMBER_GRANTS.items() for action in actions),
}


def get_scopes_for_role(role: str) -> frozenset[str]:
    return ROLE_SCOPES.get((role or "").lower(), frozenset())


def missing_scopes(role: str, required: Iterable[str]) -> list[str]:
    granted = get_scopes_for_role(role)
    if WILDCARD in granted:
        return []
    return sorted(set(required) - granted)


def has_scopes(role: str, required: Iterable[str]) -> bool:
    return not missing_scopes(role, required)


def require_scopes(role: str, required: Iterable[str]) -> None:
    missing = missing_scopes(role, required)
    if missing:
        raise AuthorizationError(f"Missing required scopes: {', '.join(missing)}")
