"""Password hashing helpers (werkzeug defaults; the algorithm is not our concern)."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(raw: str) -> str:
    """
    Hash a plain-text password.

    :param raw: Plain text password.
    :raises ValueError: If ``raw`` is empty or not a string.
    """
    if not isinstance(raw, str) or not raw:
        raise ValueError("Password must be a non-empty string.")
    return generate_password_hash(raw)


def verify_password(password_hash: str | None, raw: str) -> bool:
    """Return ``True`` when ``raw`` matches ``password_hash``."""
    if not password_hash or not isinstance(raw, str):
        return False
    # ``check_password_hash`` is untyped; coerce for mypy.
    return bool(check_password_hash(password_hash, raw))
