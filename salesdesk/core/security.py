"""Password hashing primitives."""

from __future__ import annotations

import hashlib
import hmac
import secrets

PBKDF2_ALGORITHM = "pbkdf2_sha256"
PBKDF2_ITERATIONS = 240_000


def _derive(password: str, salt: str, iterations: int, pepper: str) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        f"{pepper}:{password}".encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
    )
    return digest.hex()


def hash_password(password: str, pepper: str = "", iterations: int = PBKDF2_ITERATIONS) -> str:
    """Return `algorithm$iterations$salt$hash` for storage."""
    salt = secrets.token_hex(16)
    return f"{PBKDF2_ALGORITHM}${iterations}${salt}${_derive(password, salt, iterations, pepper)}"


def verify_password(password: str, hashed_password: str | None, pepper: str = "") -> bool:
    """Constant-time comparison for hashed password values."""
    if not hashed_password:
        return False
    try:
        algorithm, iterations, salt, expected = hashed_password.split("$", 3)
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != PBKDF2_ALGORITHM:
        return False
    candidate = _derive(password, salt, rounds, pepper)
    return hmac.compare_digest(candidate, expected)
