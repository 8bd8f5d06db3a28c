"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

import bcrypt

from auth.errors import HashingFailure

DEFAULT_ROUNDS = 12

# bcrypt only reads this many bytes of input; older releases drop the rest silently.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt (auto-salted).

    Raises ``HashingFailure`` for passwords longer than 72 bytes, so two
    plaintexts sharing a 72-byte prefix can never verify against each other.
    """
    raw = password.encode()
    if len(raw) > MAX_PASSWORD_BYTES:
        raise HashingFailure()
    try:
        return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=rounds)).decode()
    except (ValueError, TypeError) as exc:
        raise HashingFailure() from exc


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash; errors count as a mismatch."""
    raw = password.encode()
    if len(raw) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode())
    except (ValueError, TypeError):
        return False
