"""Password hashing with salted PBKDF2-SHA256."""

from __future__ import annotations

import base64
import hashlib
import hmac
import os

_ALGORITHM = "pbkdf2_sha256"
_ITERATIONS = 260000


def hash_password(password: str, iterations: int = _ITERATIONS) -> str:
    """Return ``algorithm$iterations$salt$digest`` for storage."""
    salt = base64.b64encode(os.urandom(16)).decode("ascii")
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), iterations)
    return f"{_ALGORITHM}${iterations}${salt}${base64.b64encode(digest).decode('ascii')}"


def verify_password(password: str, hashed_password: str) -> bool:
    """Constant-time check of a password against a stored hash."""
    try:
        algorithm, iterations, salt, expected = hashed_password.split("$", 3)
        rounds = int(iterations)
    except (AttributeError, ValueError):
        return False
    if algorithm != _ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), rounds)
    return hmac.compare_digest(base64.b64encode(digest).decode("ascii"), expected)
