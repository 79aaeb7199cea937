from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Protocol

from authcore.services._shared.errors import ConflictError

#: Keys a partial update may touch. Anything else is a programming error.
UPDATABLE_FIELDS = frozenset({"full_name", "password_hash", "is_verified", "refresh_token"})


@dataclass(frozen=True, slots=True)
class UserRecord:
    """
    Read-model of the credential-relevant part of a user.

    :ivar id: Unique user identifier.
    :ivar email: Normalized (lowercase, trimmed) login email.
    :ivar full_name: Optional display name.
    :ivar password_hash: Opaque password hash.
    :ivar is_verified: Whether the email OTP flow was completed.
    :ivar refresh_token: The single currently valid refresh token, if any.
    """

    id: int
    email: str
    password_hash: str
    full_name: str | None = None
    is_verified: bool = False
    refresh_token: str | None = None


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_patch(patch: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``patch`` as a dict or raise on keys outside :data:`UPDATABLE_FIELDS`."""
    unknown = sorted(set(patch) - UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown or non-updatable fields: {unknown}")
    return dict(patch)


class UserStore(Protocol):
    """
    Port over persistent user storage.

    ``update`` is a partial update that never re-validates untouched fields.
    ``swap_refresh_token`` MUST be an atomic compare-and-set on a single row/key.
    """

    def find_by_email(self, email: str) -> UserRecord | None: ...

    def find_by_id(self, user_id: int) -> UserRecord | None: ...

    def create(self, fields: Mapping[str, Any]) -> UserRecord:
        """Persist a new user. :raises ConflictError: if the email is taken."""
        ...

    def update(self, user_id: int, patch: Mapping[str, Any]) -> UserRecord | None:
        """Apply ``patch``; ``None`` when the user does not exist."""
        ...

    def swap_refresh_token(self, user_id: int, expected: str, replacement: str | None) -> bool:
        """Replace the stored refresh token only if it still equals ``expected``."""
        ...


class InMemoryUserStore(UserStore):
    """
    Dictionary-backed user store for unit tests.

    .. note::
       Uses a threading lock so compare-and-set behaves atomically.
    """

    def __init__(self) -> None:
        self._by_id: dict[int, UserRecord] = {}
        self._seq = 0
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> UserRecord | None:
        wanted = normalize_email(email)
        for user in self._by_id.values():
            if user.email == wanted:
                return user
        return None

    def find_by_id(self, user_id: int) -> UserRecord | None:
        return self._by_id.get(user_id)

    def create(self, fields: Mapping[str, Any]) -> UserRecord:
        email = normalize_email(str(fields["email"]))
        with self._lock:
            if any(u.email == email for u in self._by_id.values()):
                raise ConflictError("User", "email already in use")
            self._seq += 1
            user = UserRecord(
                id=self._seq,
                email=email,
                password_hash=str(fields["password_hash"]),
                full_name=fields.get("full_name"),
                is_verified=bool(fields.get("is_verified", False)),
                refresh_token=fields.get("refresh_token"),
            )
            self._by_id[user.id] = user
            return user

    def update(self, user_id: int, patch: Mapping[str, Any]) -> UserRecord | None:
        changes = check_patch(patch)
        with self._lock:
            user = self._by_id.get(user_id)
            if user is None:
                return None
            updated = replace(user, **changes)
            self._by_id[user_id] = updated
            return updated

    def swap_refresh_token(self, user_id: int, expected: str, replacement: str | None) -> bool:
        with self._lock:
            user = self._by_id.get(user_id)
            if user is None or user.refresh_token != expected:
                return False
            self._by_id[user_id] = replace(user, refresh_token=replacement)
            return True

    def delete(self, user_id: int) -> None:
        """Drop a user (test helper; the credential core never deletes users)."""
        with self._lock:
            self._by_id.pop(user_id, None)
